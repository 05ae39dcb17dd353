from concurrent.futures import Future
from datetime import datetime, timezone

from models import CaseRecord, Order, SearchRequest

FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_NOW


class ImmediateExecutor:
    """Runs each job inside submit()"""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor:
    """Queues jobs until run_pending() is called"""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_pending(self):
        jobs, self.pending = self.pending, []
        for future, fn, args, kwargs in jobs:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)
        return len(jobs)


class StubScraper:
    """Returns a canned record or raises a canned error, counting calls"""

    def __init__(self, record=None, error=None):
        self.record = record
        self.error = error
        self.calls = []

    def fetch_case(self, search_request):
        self.calls.append(search_request)
        if self.error is not None:
            raise self.error
        return self.record or make_case_record(search_request)


def make_search_request(case_number='1234/2024', case_type='writ', filing_year='2024'):
    return SearchRequest(case_type=case_type, case_number=case_number, filing_year=filing_year)


def make_case_record(search_request=None, status='Pending', orders=None, next_hearing_date=None):
    search_request = search_request or make_search_request()
    if orders is None:
        orders = [
            Order(id='order_1', date=datetime(2025, 6, 1, tzinfo=timezone.utc),
                  title='Interim relief granted', type='Order',
                  pdf_url='https://example.com/orders/1234%2F2024_1.pdf'),
            Order(id='order_2', date=datetime(2025, 5, 1, tzinfo=timezone.utc),
                  title='Counter affidavit filed', type='Notice'),
        ]
    return CaseRecord(
        case_number=search_request.case_number,
        case_type='Writ Petition',
        filing_year=search_request.filing_year,
        petitioner='Sunita Devi',
        respondent='State of Delhi',
        filing_date=datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc),
        status=status,
        last_updated=FIXED_NOW,
        orders=orders,
        next_hearing_date=next_hearing_date,
        search_query=search_request,
    )
