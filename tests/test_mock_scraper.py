import random
import unittest
from unittest import mock
from datetime import datetime, timedelta, timezone

from errors import CourtUnavailableError, ValidationError
from mock_scraper import (
    CASE_TYPE_LABELS,
    ORDER_TYPES,
    PETITIONERS,
    RECENT_ORDER_TITLES,
    RESPONDENTS,
    STATUSES,
    UNAVAILABLE_MESSAGE,
    MockCourtScraper,
    format_case_type,
)
from tests.helpers import FIXED_NOW, fixed_clock, make_search_request


def make_scraper(seed=0, **kwargs):
    kwargs.setdefault('failure_rate', 0.0)
    kwargs.setdefault('min_delay', 0.0)
    kwargs.setdefault('max_delay', 0.0)
    return MockCourtScraper(rng=random.Random(seed), clock=fixed_clock, **kwargs)


class TestGenerate(unittest.TestCase):

    def test_writ_petition_example(self):
        record = make_scraper().generate(make_search_request('1234/2024', 'writ', '2024'))

        self.assertEqual(record.case_type, 'Writ Petition')
        self.assertEqual(record.case_number, '1234/2024')
        self.assertEqual(record.filing_year, '2024')
        self.assertEqual(record.filing_date.year, 2024)
        self.assertTrue(1 <= len(record.orders) <= 5)
        dates = [order.date for order in record.orders]
        self.assertEqual(dates, sorted(dates, reverse=True))

    def test_properties_hold_across_seeds(self):
        request = make_search_request('77/2019', 'criminal', '2019')
        year_start = datetime(2019, 1, 1, tzinfo=timezone.utc)
        year_end = datetime(2019, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

        for seed in range(300):
            record = make_scraper(seed).generate(request)
            dates = [order.date for order in record.orders]

            self.assertTrue(1 <= len(record.orders) <= 5, seed)
            self.assertEqual(dates, sorted(dates, reverse=True), seed)
            self.assertEqual(record.latest_order.date, max(dates), seed)
            self.assertIn(record.latest_order.title, RECENT_ORDER_TITLES, seed)
            self.assertTrue(year_start <= record.filing_date <= year_end, seed)
            if record.next_hearing_date is not None:
                self.assertGreater(record.next_hearing_date, FIXED_NOW, seed)
                self.assertLessEqual(record.next_hearing_date, FIXED_NOW + timedelta(days=97), seed)
            self.assertIn(record.status, STATUSES)
            self.assertIn(record.petitioner, PETITIONERS)
            self.assertIn(record.respondent, RESPONDENTS)
            self.assertEqual(len({order.id for order in record.orders}), len(record.orders))
            for order in record.orders:
                self.assertIn(order.type, ORDER_TYPES)
                self.assertLessEqual(order.date, FIXED_NOW)

    def test_overlapping_jitter_is_sorted_latest_first(self):
        request = make_search_request()
        reordered = 0
        with mock.patch('mock_scraper.ORDER_JITTER_DAYS', 90):
            for seed in range(200):
                record = make_scraper(seed).generate(request)
                dates = [order.date for order in record.orders]
                indexes = [int(order.id.split('_')[1]) for order in record.orders]

                self.assertEqual(dates, sorted(dates, reverse=True), seed)
                self.assertEqual(record.orders[0].date, max(dates), seed)
                self.assertIn(record.orders[0].title, RECENT_ORDER_TITLES, seed)
                if indexes != sorted(indexes):
                    reordered += 1

        # Wide jitter must actually move orders out of generation order
        self.assertGreater(reordered, 0)

    def test_same_seed_gives_same_record(self):
        request = make_search_request()
        first = make_scraper(seed=42).generate(request)
        second = make_scraper(seed=42).generate(request)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_case_type_labels(self):
        self.assertEqual(len(CASE_TYPE_LABELS), 8)
        self.assertEqual(format_case_type('tax'), 'Income Tax Appeal')
        self.assertEqual(format_case_type('bail'), 'Bail Application')
        self.assertEqual(format_case_type('admiralty'), 'Civil Matter')

        record = make_scraper().generate(make_search_request(case_type='admiralty'))
        self.assertEqual(record.case_type, 'Civil Matter')

    def test_pdf_urls_follow_case_number_and_order_index(self):
        record = make_scraper(seed=3).generate(make_search_request('1234/2024'))
        for order in record.orders:
            index = order.id.split('_')[1]
            self.assertEqual(order.pdf_url, f'https://example.com/orders/1234%2F2024_{index}.pdf')

    def test_search_query_and_last_updated(self):
        request = make_search_request()
        record = make_scraper().generate(request)
        self.assertEqual(record.search_query, request)
        self.assertEqual(record.last_updated, FIXED_NOW)


class TestNextHearing(unittest.TestCase):

    def test_never_scheduled_is_omitted(self):
        record = make_scraper(no_hearing_rate=1.0).generate(make_search_request())
        self.assertIsNone(record.next_hearing_date)
        self.assertNotIn('next_hearing_date', record.to_dict())

    def test_always_scheduled(self):
        record = make_scraper(no_hearing_rate=0.0).generate(make_search_request())
        self.assertIsNotNone(record.next_hearing_date)
        self.assertGreaterEqual(record.next_hearing_date - FIXED_NOW, timedelta(days=7))
        self.assertIn('next_hearing_date', record.to_dict())


class TestFailureInjection(unittest.TestCase):

    def test_forced_failure_raises_unavailable(self):
        with self.assertRaises(CourtUnavailableError) as ctx:
            make_scraper(failure_rate=1.0).generate(make_search_request())
        self.assertEqual(ctx.exception.message, UNAVAILABLE_MESSAGE)
        self.assertEqual(str(ctx.exception), 'Court website temporarily unavailable')

    def test_validation_runs_before_failure_gate(self):
        with self.assertRaises(ValidationError):
            make_scraper(failure_rate=1.0).generate(make_search_request(case_type=''))

    def test_invalid_rates_rejected(self):
        with self.assertRaises(ValueError):
            MockCourtScraper(failure_rate=1.5)
        with self.assertRaises(ValueError):
            MockCourtScraper(no_hearing_rate=-0.1)
        with self.assertRaises(ValueError):
            MockCourtScraper(min_delay=5.0, max_delay=2.0)


class TestFetchCase(unittest.TestCase):

    def test_sleeps_within_latency_window(self):
        delays = []
        scraper = MockCourtScraper(
            rng=random.Random(5),
            clock=fixed_clock,
            failure_rate=0.0,
            sleep=delays.append,
        )
        record = scraper.fetch_case(make_search_request())

        self.assertEqual(len(delays), 1)
        self.assertTrue(2.0 <= delays[0] <= 5.0)
        self.assertEqual(record.case_type, 'Writ Petition')

    def test_form_options(self):
        scraper = make_scraper()
        self.assertEqual(len(scraper.get_case_types()), 8)
        years = scraper.get_years()
        self.assertEqual(len(years), 10)
        self.assertEqual(years[0], '2025')
        self.assertEqual(years[-1], '2016')


if __name__ == '__main__':
    unittest.main()
