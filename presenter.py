from datetime import datetime, timezone

PENDING = 'pending'
RESOLVED = 'resolved'
UNKNOWN = 'unknown'

EMPTY_ORDERS_MESSAGE = 'No orders or judgments available yet'
COURT_NAME = 'Delhi High Court'


def classify_status(status):
    """Bucket a case status for display: pending, resolved or unknown"""
    normalized = (status or '').strip().lower()
    if normalized == 'pending':
        return PENDING
    if normalized == 'disposed':
        return RESOLVED
    return UNKNOWN


def format_date(value):
    if value is None:
        return None
    return value.strftime('%d/%m/%Y')


def _plural(count, unit):
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def time_distance(value, now=None):
    """Human readable distance between two times, e.g. 'in 12 days' or '3 months ago'"""
    now = now or datetime.now(timezone.utc)
    seconds = (value - now).total_seconds()
    future = seconds > 0
    seconds = abs(seconds)

    minutes = round(seconds / 60)
    hours = round(seconds / 3600)
    days = round(seconds / 86400)
    if seconds < 30:
        distance = 'less than a minute'
    elif minutes < 45:
        distance = _plural(max(minutes, 1), 'minute')
    elif hours < 24:
        distance = 'about ' + _plural(max(hours, 1), 'hour')
    elif days < 30:
        distance = _plural(max(days, 1), 'day')
    elif days < 365:
        distance = _plural(max(round(days / 30), 1), 'month')
    else:
        distance = 'about ' + _plural(max(round(days / 365), 1), 'year')

    return f"in {distance}" if future else f"{distance} ago"


def download_filename(case_number, order):
    safe_number = case_number.replace('/', '-')
    return f"{safe_number}_{order.date.strftime('%Y-%m-%d')}_order.pdf"


def present_order(case_record, order, index, now):
    return {
        'index': index,
        'id': order.id,
        'title': order.title,
        'type': order.type,
        'date': format_date(order.date),
        'date_relative': time_distance(order.date, now),
        'is_latest': index == 0,
        'pdf_url': order.pdf_url,
        'filename': download_filename(case_record.case_number, order) if order.pdf_url else None,
    }


def present_case(case_record, now=None):
    now = now or datetime.now(timezone.utc)
    orders = [
        present_order(case_record, order, index, now)
        for index, order in enumerate(case_record.orders)
    ]
    view = {
        'title': f"Case {case_record.case_number}/{case_record.filing_year}",
        'subtitle': f"{case_record.case_type} - {COURT_NAME}",
        'case_number': case_record.case_number,
        'case_type': case_record.case_type,
        'filing_year': case_record.filing_year,
        'status': case_record.status,
        'status_bucket': classify_status(case_record.status),
        'petitioner': case_record.petitioner,
        'respondent': case_record.respondent,
        'filing_date': format_date(case_record.filing_date),
        'next_hearing': None,
        'order_count': len(orders),
        'orders': orders,
        'orders_empty_message': None if orders else EMPTY_ORDERS_MESSAGE,
        'last_updated': time_distance(case_record.last_updated, now),
    }
    if case_record.next_hearing_date is not None:
        view['next_hearing'] = {
            'date': format_date(case_record.next_hearing_date),
            'relative': time_distance(case_record.next_hearing_date, now),
        }
    return view


def present(case_record, loading, error, now=None):
    """Display structure for the results area of the page"""
    if loading:
        return {'state': 'loading', 'error': None, 'case': None}
    if error:
        return {'state': 'error', 'error': error, 'case': None}
    if case_record is not None:
        return {'state': 'result', 'error': None, 'case': present_case(case_record, now)}
    return {'state': 'empty', 'error': None, 'case': None}
