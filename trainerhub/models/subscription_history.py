"""
Subscription history model: one immutable row per status-affecting event.
"""
from sqlalchemy import Index, event

from trainerhub import db

from .base import BaseModel, utcnow


class HistoryImmutableError(RuntimeError):
    """Raised when code tries to change or delete an append-only row."""


class SubscriptionHistoryEntry(BaseModel):
    """
    Snapshot of a trainer's subscription at the moment of an event.

    ``plan_id`` carries no foreign key: a plan may be deleted once no trainer
    is on it, while its history rows keep ``plan_name`` as a snapshot.
    """
    __tablename__ = 'subscription_history'

    trainer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    plan_id = db.Column(db.Integer, nullable=True)
    plan_name = db.Column(db.String(100), nullable=True)
    period = db.Column(db.String(20), nullable=False)
    discount_percent = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    start_date = db.Column(db.Date, nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=False)
    final_monthly_price = db.Column(db.Numeric(10, 2), nullable=True)
    final_annual_price = db.Column(db.Numeric(10, 2), nullable=True)
    cancellation_reason = db.Column(db.String(255), nullable=True)
    recorded_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_history_trainer_recorded', 'trainer_id', 'recorded_at'),
    )

    def __repr__(self):
        return (f"<SubscriptionHistoryEntry Trainer:{self.trainer_id} "
                f"Plan:{self.plan_id} Status:{self.status}>")


@event.listens_for(SubscriptionHistoryEntry, 'before_update')
def _refuse_history_update(mapper, connection, target):
    raise HistoryImmutableError(f"History entry {target.id} is append-only")


@event.listens_for(SubscriptionHistoryEntry, 'before_delete')
def _refuse_history_delete(mapper, connection, target):
    raise HistoryImmutableError(f"History entry {target.id} is append-only")
