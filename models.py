from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class CaseQuery(db.Model):
    """Audit log entry for a completed case search"""
    __tablename__ = 'case_queries'

    id = db.Column(db.Integer, primary_key=True)
    case_type = db.Column(db.String(100), nullable=False)
    case_number = db.Column(db.String(50), nullable=False)
    filing_year = db.Column(db.String(10), nullable=False)
    success = db.Column(db.Boolean, default=False, nullable=False)
    error_message = db.Column(db.Text)
    processing_time = db.Column(db.Float)  # seconds
    timestamp = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<CaseQuery {self.case_type}/{self.case_number}/{self.filing_year}>'


@dataclass(frozen=True)
class SearchRequest:
    """The three form fields that identify a case"""

    case_type: str = ''
    case_number: str = ''
    filing_year: str = ''

    @classmethod
    def from_mapping(cls, data):
        """Build a request from form data or a JSON body"""
        data = data or {}
        return cls(
            case_type=(data.get('case_type') or '').strip(),
            case_number=(data.get('case_number') or '').strip(),
            filing_year=str(data.get('filing_year') or '').strip(),
        )

    def to_dict(self):
        return {
            'case_type': self.case_type,
            'case_number': self.case_number,
            'filing_year': self.filing_year,
        }

    def __str__(self):
        return f'{self.case_type} {self.case_number}/{self.filing_year}'


@dataclass
class Order:
    """A single order or judgment docketed against a case"""

    id: str
    date: datetime
    title: str
    type: str
    pdf_url: Optional[str] = None

    def to_dict(self):
        data = {
            'id': self.id,
            'date': self.date.isoformat(),
            'title': self.title,
            'type': self.type,
        }
        if self.pdf_url:
            data['pdf_url'] = self.pdf_url
        return data


@dataclass
class CaseRecord:
    """Case details returned for a search.

    ``orders`` is kept sorted most recent first, so ``orders[0]`` is the
    latest order. A case with no scheduled hearing has
    ``next_hearing_date`` set to None and the key is left out of
    ``to_dict()``.
    """

    case_number: str
    case_type: str
    filing_year: str
    petitioner: str
    respondent: str
    filing_date: datetime
    status: str
    last_updated: datetime
    orders: List[Order] = field(default_factory=list)
    next_hearing_date: Optional[datetime] = None
    search_query: Optional[SearchRequest] = None

    @property
    def latest_order(self):
        return self.orders[0] if self.orders else None

    @property
    def parties(self):
        return {'petitioner': self.petitioner, 'respondent': self.respondent}

    def to_dict(self):
        data = {
            'case_number': self.case_number,
            'case_type': self.case_type,
            'filing_year': self.filing_year,
            'parties': self.parties,
            'filing_date': self.filing_date.isoformat(),
            'status': self.status,
            'orders': [order.to_dict() for order in self.orders],
            'last_updated': self.last_updated.isoformat(),
        }
        if self.next_hearing_date is not None:
            data['next_hearing_date'] = self.next_hearing_date.isoformat()
        if self.search_query is not None:
            data['search_query'] = self.search_query.to_dict()
        return data


class SearchHistory:
    """Most-recent-first list of past searches with a fixed capacity.

    Duplicates are kept: searching the same case twice records it twice.
    """

    def __init__(self, capacity=5):
        if capacity < 1:
            raise ValueError('capacity must be at least 1')
        self.capacity = capacity
        self._entries = deque(maxlen=capacity)

    def push(self, search_request):
        self._entries.appendleft(search_request)

    def clear(self):
        self._entries.clear()

    def to_list(self):
        return list(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def __len__(self):
        return len(self._entries)

    def __getitem__(self, index):
        return self._entries[index]
