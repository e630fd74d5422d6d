"""
Audit entry model recording who performed which mutation.
"""
from sqlalchemy import Index, event

from trainerhub import db

from .base import BaseModel, utcnow
from .subscription_history import HistoryImmutableError


class AuditEntry(BaseModel):
    """
    Append-only audit log row.

    Attributes:
        action (str): One of ``AuditAction`` values
        actor_id (int): Administrator who acted, None for system sweeps
        trainer_id (int): Affected trainer, if any
        plan_id (int): Affected plan, if any
        details (dict): Action-specific payload
        recorded_at (datetime): When the action was recorded
    """
    __tablename__ = 'audit_entries'

    action = db.Column(db.String(32), nullable=False)
    actor_id = db.Column(db.Integer, nullable=True)
    trainer_id = db.Column(db.Integer, nullable=True)
    plan_id = db.Column(db.Integer, nullable=True)
    details = db.Column(db.JSON, nullable=False, default=dict)
    recorded_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_audit_trainer', 'trainer_id'),
        Index('idx_audit_plan', 'plan_id'),
        Index('idx_audit_action_recorded', 'action', 'recorded_at'),
    )

    def __repr__(self):
        return f"<AuditEntry {self.action} Actor:{self.actor_id} Trainer:{self.trainer_id}>"


@event.listens_for(AuditEntry, 'before_update')
def _refuse_audit_update(mapper, connection, target):
    raise HistoryImmutableError(f"Audit entry {target.id} is append-only")


@event.listens_for(AuditEntry, 'before_delete')
def _refuse_audit_delete(mapper, connection, target):
    raise HistoryImmutableError(f"Audit entry {target.id} is append-only")
