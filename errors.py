class CourtDataError(Exception):
    """Base class for errors surfaced to the user during a case search"""

    error_type = 'court_data_error'

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(CourtDataError):
    """Search request is missing a required field or is malformed"""

    error_type = 'validation_error'


class CourtUnavailableError(CourtDataError):
    """Court data source is temporarily unavailable"""

    error_type = 'court_unavailable'
