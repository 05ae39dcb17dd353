"""
Search lifecycle for a single browser session.

A controller moves through idle -> loading -> success/error. Only one
search may be in flight at a time: submissions made while loading are
ignored and ``can_submit`` reports False so the page can disable its
buttons.
"""

import logging
import threading
import time
from collections import OrderedDict, deque, namedtuple

from errors import CourtDataError, CourtUnavailableError
from models import SearchHistory
from validation import validate_search_request

logger = logging.getLogger(__name__)

IDLE = 'idle'
LOADING = 'loading'
SUCCESS = 'success'
ERROR = 'error'

GENERIC_FAILURE_MESSAGE = 'Failed to fetch case data'

Notification = namedtuple('Notification', ['kind', 'title', 'detail'])


class SearchController:
    """Owns the current result, error, history and loading flag of one session"""

    def __init__(self, scraper, executor, history_size=5, audit=None):
        self.scraper = scraper
        self.executor = executor
        self.audit = audit
        self.history = SearchHistory(history_size)
        self.state = IDLE
        self.result = None
        self.error = None
        self._lock = threading.Lock()
        self._listeners = []
        self._notifications = deque(maxlen=20)

    @property
    def loading(self):
        return self.state == LOADING

    @property
    def can_submit(self):
        return not self.loading

    def subscribe(self, listener):
        """Register a callable that receives every Notification"""
        self._listeners.append(listener)

    def drain_notifications(self):
        """Return and forget the notifications emitted since the last call"""
        with self._lock:
            pending = list(self._notifications)
            self._notifications.clear()
        return pending

    def submit(self, search_request):
        """Start a search.

        Raises ValidationError without changing any state. Returns False if
        a search is already running, True once the new search is scheduled.
        Raises CourtUnavailableError when the search cannot be scheduled.
        """
        validate_search_request(search_request)

        with self._lock:
            if self.state == LOADING:
                logger.info(f"Ignoring search {search_request}: another search is in progress")
                return False
            self.state = LOADING
            self.result = None
            self.error = None

        logger.info(f"🔍 Search started: {search_request}")
        try:
            self.executor.submit(self._run, search_request)
        except RuntimeError as e:
            # Executor was shut down; leave the controller submittable
            logger.error(f"Could not schedule search {search_request}: {str(e)}")
            self._reject(search_request, GENERIC_FAILURE_MESSAGE, 0.0)
            raise CourtUnavailableError(GENERIC_FAILURE_MESSAGE) from e
        return True

    def snapshot(self):
        """Consistent copy of the state for rendering"""
        with self._lock:
            return {
                'state': self.state,
                'loading': self.state == LOADING,
                'can_submit': self.state != LOADING,
                'result': self.result,
                'error': self.error,
                'history': self.history.to_list(),
            }

    def _run(self, search_request):
        started = time.monotonic()
        try:
            case_record = self.scraper.fetch_case(search_request)
        except CourtDataError as e:
            logger.warning(f"❌ Search failed: {search_request} - {e.message}")
            self._reject(search_request, e.message, time.monotonic() - started)
        except Exception as e:
            logger.error(f"Error searching case {search_request}: {str(e)}", exc_info=True)
            self._reject(search_request, GENERIC_FAILURE_MESSAGE, time.monotonic() - started)
        else:
            self._resolve(search_request, case_record, time.monotonic() - started)

    def _resolve(self, search_request, case_record, elapsed):
        with self._lock:
            self.result = case_record
            self.error = None
            self.history.push(search_request)
            self.state = SUCCESS
        logger.info(f"✅ Search finished: {search_request} in {elapsed:.2f}s")
        self._notify(Notification(
            'success',
            'Case Found',
            f'Successfully retrieved data for case {search_request.case_number}/{search_request.filing_year}',
        ))
        self._record(search_request, None, elapsed)

    def _reject(self, search_request, message, elapsed):
        with self._lock:
            self.result = None
            self.error = message
            self.state = ERROR
        self._notify(Notification('error', 'Search Failed', message))
        self._record(search_request, message, elapsed)

    def _notify(self, notification):
        with self._lock:
            self._notifications.append(notification)
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"Notification listener failed: {str(e)}", exc_info=True)

    def _record(self, search_request, error, elapsed):
        if self.audit is None:
            return
        try:
            self.audit(search_request, error, elapsed)
        except Exception as e:
            logger.error(f"Could not record search {search_request}: {str(e)}", exc_info=True)


class SearchSessions:
    """In-memory map from browser session id to its SearchController.

    Holds at most ``max_sessions`` controllers. When full, the least
    recently used controller that is not loading is dropped; a session
    whose search is still running is never evicted.
    """

    def __init__(self, scraper, executor, history_size=5, audit=None, max_sessions=1000):
        if max_sessions < 1:
            raise ValueError('max_sessions must be at least 1')
        self.scraper = scraper
        self.executor = executor
        self.history_size = history_size
        self.audit = audit
        self.max_sessions = max_sessions
        self._controllers = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id):
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is not None:
                self._controllers.move_to_end(session_id)
                return controller

            self._evict()
            controller = SearchController(
                self.scraper,
                self.executor,
                history_size=self.history_size,
                audit=self.audit,
            )
            self._controllers[session_id] = controller
            return controller

    def _evict(self):
        while len(self._controllers) >= self.max_sessions:
            idle_id = next(
                (sid for sid, controller in self._controllers.items() if not controller.loading),
                None,
            )
            if idle_id is None:
                logger.warning(f"All {len(self._controllers)} sessions have a search running; not evicting")
                return
            del self._controllers[idle_id]
            logger.debug(f"Evicted search session {idle_id}")

    def __contains__(self, session_id):
        return session_id in self._controllers

    def __len__(self):
        return len(self._controllers)
