"""
Lead model — one row per prospect, owned by exactly one user, unique on email.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Numeric, Boolean, DateTime, ForeignKey,
    CheckConstraint, Index,
)

from leadtracker.config import LEAD_SOURCES, LEAD_STATUSES
from leadtracker.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


def _in_list(column, values):
    quoted = ', '.join(f"'{v}'" for v in values)
    return f'{column} IN ({quoted})'


class Lead(Base):
    __tablename__ = 'leads'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(20), nullable=True)
    company = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    source = Column(String(50), nullable=False)
    status = Column(String(50), nullable=False, default='new')
    score = Column(Integer, nullable=False, default=0)
    lead_value = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    is_qualified = Column(Boolean, nullable=False, default=False)
    last_activity_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint(_in_list('source', LEAD_SOURCES), name='ck_leads_source'),
        CheckConstraint(_in_list('status', LEAD_STATUSES), name='ck_leads_status'),
        CheckConstraint('score >= 0 AND score <= 100', name='ck_leads_score_range'),
        CheckConstraint('lead_value >= 0', name='ck_leads_value_non_negative'),
        Index('ix_leads_owner_id', 'owner_id'),
        Index('ix_leads_status', 'status'),
        Index('ix_leads_source', 'source'),
    )

    def to_dict(self):
        """Serialize with external field names."""
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'company': self.company,
            'city': self.city,
            'state': self.state,
            'source': self.source,
            'status': self.status,
            'score': self.score,
            'value': float(self.lead_value) if self.lead_value is not None else None,
            'qualified': bool(self.is_qualified),
            'last_activity_at': _iso(self.last_activity_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


def _iso(dt):
    return dt.isoformat() if dt else None
