import logging
import re

from errors import ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = 'Please fill in all required fields'
FILING_YEAR_MESSAGE = 'Filing year must be a 4-digit year'

_YEAR_PATTERN = re.compile(r'^[1-9]\d{3}$')


def validate_search_request(search_request):
    """Raise ValidationError unless all three search fields are filled in"""
    fields = (search_request.case_type, search_request.case_number, search_request.filing_year)
    if not all(value and str(value).strip() for value in fields):
        logger.info(f"Rejected incomplete search request: {search_request.to_dict()}")
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    if not _YEAR_PATTERN.match(str(search_request.filing_year).strip()):
        logger.info(f"Rejected filing year: {search_request.filing_year!r}")
        raise ValidationError(FILING_YEAR_MESSAGE)
