from flask import Flask, Blueprint, current_app, render_template, request, jsonify, flash, redirect, url_for, session
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
import logging
import os
import uuid

from config import config
from controller import SearchSessions
from errors import CourtDataError, ValidationError
from mock_scraper import MockCourtScraper
from models import db, CaseQuery, SearchRequest
from presenter import present, download_filename

logger = logging.getLogger(__name__)

court = Blueprint('court', __name__)


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def make_query_logger(app):
    """Audit callback that writes one CaseQuery row per finished search"""
    def log_query(search_request, error, processing_time):
        with app.app_context():
            db.session.add(CaseQuery(
                case_type=search_request.case_type,
                case_number=search_request.case_number,
                filing_year=search_request.filing_year,
                success=error is None,
                error_message=error,
                processing_time=processing_time,
                timestamp=datetime.now(timezone.utc),
            ))
            db.session.commit()
    return log_query


def create_app(config_name=None, scraper=None, executor=None):
    """Create and configure the Flask application"""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))
    configure_logging(app)

    # Initialize database
    db.init_app(app)
    with app.app_context():
        db.create_all()

    if scraper is None:
        scraper = MockCourtScraper(
            failure_rate=app.config['SEARCH_FAILURE_RATE'],
            no_hearing_rate=app.config['SEARCH_NO_HEARING_RATE'],
            min_delay=app.config['SEARCH_MIN_DELAY'],
            max_delay=app.config['SEARCH_MAX_DELAY'],
            pdf_base_url=app.config['PDF_BASE_URL'],
        )
    if executor is None:
        executor = ThreadPoolExecutor(
            max_workers=app.config['SEARCH_WORKERS'],
            thread_name_prefix='case-search',
        )

    app.extensions['court_scraper'] = scraper
    app.extensions['court_search'] = SearchSessions(
        scraper,
        executor,
        history_size=app.config['SEARCH_HISTORY_SIZE'],
        audit=make_query_logger(app),
        max_sessions=app.config['SEARCH_MAX_SESSIONS'],
    )

    app.register_blueprint(court)
    logger.info(f"Court Data Fetcher created with '{config_name}' config")
    return app


def get_search_controller():
    """Controller for the current browser session"""
    if 'sid' not in session:
        session['sid'] = uuid.uuid4().hex
    return current_app.extensions['court_search'].get(session['sid'])


def status_payload(controller):
    snapshot = controller.snapshot()
    case_record = snapshot['result']
    return {
        'success': True,
        'state': snapshot['state'],
        'loading': snapshot['loading'],
        'can_submit': snapshot['can_submit'],
        'error': snapshot['error'],
        'view': present(case_record, snapshot['loading'], snapshot['error']),
        'case_data': case_record.to_dict() if case_record else None,
        'history': [entry.to_dict() for entry in snapshot['history']],
    }


@court.route('/')
def index():
    """Main page with case search form"""
    controller = get_search_controller()
    for notification in controller.drain_notifications():
        flash(f'{notification.title}: {notification.detail}', notification.kind)

    snapshot = controller.snapshot()
    view = present(snapshot['result'], snapshot['loading'], snapshot['error'])
    scraper = current_app.extensions['court_scraper']

    return render_template(
        'index.html',
        view=view,
        loading=snapshot['loading'],
        can_submit=snapshot['can_submit'],
        history=snapshot['history'],
        case_types=scraper.get_case_types(),
        years=scraper.get_years(),
        form=session.get('last_search', {}),
    )


@court.route('/search', methods=['POST'])
def search_case():
    """Handle case search request"""
    search_request = SearchRequest.from_mapping(request.form)
    session['last_search'] = search_request.to_dict()
    controller = get_search_controller()

    try:
        accepted = controller.submit(search_request)
    except ValidationError as e:
        flash(f'Validation Error: {e.message}', 'error')
        return redirect(url_for('court.index'))
    except CourtDataError as e:
        flash(f'Search Failed: {e.message}', 'error')
        return redirect(url_for('court.index'))

    if not accepted:
        flash('A search is already in progress. Please wait for it to finish.', 'warning')
    return redirect(url_for('court.index'))


@court.route('/api/search', methods=['POST'])
def api_search():
    """API endpoint to start a search"""
    payload = request.get_json(silent=True) or request.form
    search_request = SearchRequest.from_mapping(payload)
    controller = get_search_controller()

    try:
        accepted = controller.submit(search_request)
    except ValidationError as e:
        return jsonify({
            'success': False,
            'error': e.error_type,
            'message': e.message
        }), 400
    except CourtDataError as e:
        return jsonify({
            'success': False,
            'error': e.error_type,
            'message': e.message
        }), 503

    if not accepted:
        return jsonify({
            'success': False,
            'error': 'search_in_progress',
            'message': 'A search is already in progress'
        }), 409

    return jsonify({
        'success': True,
        'state': controller.snapshot()['state'],
        'search_query': search_request.to_dict()
    }), 202


@court.route('/api/search/status')
def api_search_status():
    """API endpoint to poll the current search"""
    return jsonify(status_payload(get_search_controller()))


@court.route('/download_pdf/<int:order_index>')
def download_pdf(order_index):
    """Open the PDF for a specific order/judgment"""
    controller = get_search_controller()
    case_record = controller.snapshot()['result']
    if case_record is None:
        flash('Case not found', 'error')
        return redirect(url_for('court.index'))

    if order_index >= len(case_record.orders):
        logger.error(f"Order index {order_index} out of range (max: {len(case_record.orders) - 1})")
        flash('Order not found', 'error')
        return redirect(url_for('court.index'))

    order = case_record.orders[order_index]
    if not order.pdf_url:
        logger.warning(f"No PDF link for order {order_index}")
        flash('PDF not available for this order', 'error')
        return redirect(url_for('court.index'))

    filename = download_filename(case_record.case_number, order)
    logger.info(f"PDF download requested: {filename} -> {order.pdf_url}")
    flash(f'Download Started: Downloading {filename}', 'info')
    return redirect(order.pdf_url)


@court.route('/history')
def search_history():
    """Display the query log"""
    limit = current_app.config.get('QUERY_LOG_LIMIT', 50)
    queries = CaseQuery.query.order_by(CaseQuery.timestamp.desc()).limit(limit).all()
    return render_template('history.html', queries=queries)


@court.route('/api/case-types')
def api_case_types():
    """API endpoint to get available case types"""
    case_types = current_app.extensions['court_scraper'].get_case_types()
    return jsonify({
        'success': True,
        'case_types': case_types,
        'count': len(case_types)
    })


@court.route('/api/years')
def api_years():
    """API endpoint to get available years"""
    years = current_app.extensions['court_scraper'].get_years()
    return jsonify({
        'success': True,
        'years': years,
        'count': len(years)
    })


@court.app_errorhandler(404)
def not_found_error(error):
    return render_template('error.html', error_message="Page not found"), 404


@court.app_errorhandler(500)
def internal_error(error):
    db.session.rollback()
    return render_template('error.html', error_message="Internal server error"), 500


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=5000)
