import logging
import random
import time
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

from errors import CourtUnavailableError
from models import CaseRecord, Order
from validation import validate_search_request

logger = logging.getLogger(__name__)

# Options offered by the search form
CASE_TYPE_OPTIONS = [
    {'value': 'civil', 'label': 'Civil Appeal'},
    {'value': 'criminal', 'label': 'Criminal Appeal'},
    {'value': 'writ', 'label': 'Writ Petition'},
    {'value': 'company', 'label': 'Company Petition'},
    {'value': 'tax', 'label': 'Tax Appeal'},
    {'value': 'service', 'label': 'Service Matter'},
    {'value': 'matrimonial', 'label': 'Matrimonial'},
    {'value': 'bail', 'label': 'Bail Application'},
]

# Labels shown on a case record
CASE_TYPE_LABELS = {
    'civil': 'Civil Appeal',
    'criminal': 'Criminal Appeal',
    'writ': 'Writ Petition',
    'company': 'Company Petition',
    'tax': 'Income Tax Appeal',
    'service': 'Service Matter',
    'matrimonial': 'Matrimonial Dispute',
    'bail': 'Bail Application',
}
DEFAULT_CASE_TYPE_LABEL = 'Civil Matter'

PETITIONERS = [
    'Rajesh Kumar Singh',
    'Priya Sharma vs State of Delhi',
    'ABC Corporation Ltd.',
    'Municipal Corporation of Delhi',
    'Sunita Devi',
    'Delhi Development Authority',
]

RESPONDENTS = [
    'State of Delhi',
    'Central Government of India',
    'Delhi Police Commissioner',
    'Registrar General, Delhi High Court',
    'Union of India & Ors.',
    'XYZ Industries Pvt. Ltd.',
]

STATUSES = ['Pending', 'Disposed', 'Part Heard', 'Reserved for Orders']

# The first three read like recent orders and are used for the latest one
ORDER_TITLES = [
    'Order on admission and notice',
    'Interim relief granted',
    'Counter affidavit filed',
    'Arguments heard - reserved for orders',
    'Final judgment and order',
    'Clarification on previous order',
    'Stay granted pending final disposal',
]
RECENT_ORDER_TITLES = ORDER_TITLES[:3]

ORDER_TYPES = ['Order', 'Judgment', 'Notice', 'Direction', 'Clarification']

UNAVAILABLE_MESSAGE = 'Court website temporarily unavailable'

MAX_ORDERS = 5
ORDER_SPACING_DAYS = 30
ORDER_JITTER_DAYS = 20
MIN_HEARING_DAYS = 7
HEARING_WINDOW_DAYS = 90


def format_case_type(case_type):
    """Map a form case type to its display label"""
    return CASE_TYPE_LABELS.get(case_type, DEFAULT_CASE_TYPE_LABEL)


def get_years(today=None, count=10):
    """Filing years offered by the form, newest first"""
    today = today or datetime.now(timezone.utc)
    return [str(today.year - i) for i in range(count)]


class MockCourtScraper:
    """Stand-in for the court website that synthesizes plausible case data.

    All randomness comes from ``rng`` and the current time from ``clock`` so
    a seeded ``random.Random`` and a fixed clock give repeatable records.
    ``fetch_case`` adds the simulated network latency on top of ``generate``
    and is the call a real scraper would replace.
    """

    def __init__(self, rng=None, clock=None, failure_rate=0.1, no_hearing_rate=0.3,
                 min_delay=2.0, max_delay=5.0, sleep=time.sleep,
                 pdf_base_url='https://example.com/orders'):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f'failure_rate must be between 0 and 1, got {failure_rate}')
        if not 0.0 <= no_hearing_rate <= 1.0:
            raise ValueError(f'no_hearing_rate must be between 0 and 1, got {no_hearing_rate}')
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(f'invalid delay range {min_delay}..{max_delay}')

        self.rng = rng or random.Random()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.failure_rate = failure_rate
        self.no_hearing_rate = no_hearing_rate
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.sleep = sleep
        self.pdf_base_url = pdf_base_url.rstrip('/')

    def get_case_types(self):
        """Get list of available case types"""
        return list(CASE_TYPE_OPTIONS)

    def get_years(self):
        """Get list of available years"""
        return get_years(self.clock())

    def fetch_case(self, search_request):
        """Wait out the simulated latency, then return a generated case record"""
        delay = self.rng.uniform(self.min_delay, self.max_delay)
        logger.info(f"Fetching case {search_request} (simulated latency {delay:.2f}s)")
        if delay > 0:
            self.sleep(delay)
        return self.generate(search_request)

    def generate(self, search_request):
        """Build a mock case record for the request.

        Raises ValidationError for an incomplete request and
        CourtUnavailableError for an injected outage. The outage check runs
        after the record is built.
        """
        validate_search_request(search_request)

        now = self.clock()
        case_record = CaseRecord(
            case_number=search_request.case_number,
            case_type=format_case_type(search_request.case_type),
            filing_year=search_request.filing_year,
            petitioner=self.rng.choice(PETITIONERS),
            respondent=self.rng.choice(RESPONDENTS),
            filing_date=self.generate_filing_date(search_request.filing_year),
            next_hearing_date=self.generate_next_hearing_date(now),
            status=self.rng.choice(STATUSES),
            orders=self.generate_orders(search_request.case_number, now),
            last_updated=now,
            search_query=search_request,
        )

        if self.rng.random() < self.failure_rate:
            logger.warning(f"Injected outage for case {search_request}")
            raise CourtUnavailableError(UNAVAILABLE_MESSAGE)

        logger.info(f"Generated case {search_request} with {len(case_record.orders)} order(s)")
        return case_record

    def generate_filing_date(self, filing_year):
        year = int(filing_year)
        start = datetime(year, 1, 1, tzinfo=timezone.utc)
        end = datetime(year, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
        return start + (end - start) * self.rng.random()

    def generate_next_hearing_date(self, now):
        if self.rng.random() < self.no_hearing_rate:
            return None
        days = self.rng.randrange(HEARING_WINDOW_DAYS) + MIN_HEARING_DAYS
        return now + timedelta(days=days)

    def generate_orders(self, case_number, now):
        order_count = self.rng.randint(1, MAX_ORDERS)

        dated = []
        for i in range(order_count):
            days_ago = i * ORDER_SPACING_DAYS + self.rng.randrange(ORDER_JITTER_DAYS)
            dated.append((i, now - timedelta(days=days_ago)))

        # Jitter alone does not promise ordering, so sort explicitly
        dated.sort(key=lambda item: item[1], reverse=True)

        orders = []
        for position, (i, order_date) in enumerate(dated):
            titles = RECENT_ORDER_TITLES if position == 0 else ORDER_TITLES
            orders.append(Order(
                id=f'order_{i + 1}',
                date=order_date,
                title=self.rng.choice(titles),
                type=self.rng.choice(ORDER_TYPES),
                pdf_url=self.pdf_url(case_number, i),
            ))
        return orders

    def pdf_url(self, case_number, order_index):
        return f"{self.pdf_base_url}/{quote(case_number, safe='')}_{order_index + 1}.pdf"
