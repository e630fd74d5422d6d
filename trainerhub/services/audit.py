"""
Audit trail of subscription and catalog mutations.
"""
from trainerhub import db
from trainerhub.models import AuditAction, AuditEntry
from trainerhub.models.base import utcnow
from trainerhub.utils.json_helpers import convert_decimal_in_dict


class AuditTrail:
    """Appends audit entries to the caller's transaction and lists them."""

    def record(self, action, actor_id, trainer_id=None, plan_id=None, **details):
        """
        Add an audit entry to the current session.

        The entry is committed together with the mutation it describes.

        Args:
            action (AuditAction): What happened
            actor_id (int or None): Administrator who acted, None for the system
            trainer_id (int, optional): Affected trainer
            plan_id (int, optional): Affected plan
            **details: Action-specific values (Decimals, dates and enums are
                converted for the JSON column)

        Returns:
            AuditEntry: The pending entry
        """
        entry = AuditEntry(
            action=AuditAction(action).value,
            actor_id=actor_id,
            trainer_id=trainer_id,
            plan_id=plan_id,
            details=convert_decimal_in_dict(details),
            recorded_at=utcnow(),
        )
        db.session.add(entry)
        return entry

    def entries(self, trainer_id=None, plan_id=None, action=None):
        """List audit entries, newest first, optionally filtered."""
        query = AuditEntry.query
        if trainer_id is not None:
            query = query.filter(AuditEntry.trainer_id == trainer_id)
        if plan_id is not None:
            query = query.filter(AuditEntry.plan_id == plan_id)
        if action is not None:
            query = query.filter(AuditEntry.action == AuditAction(action).value)
        return query.order_by(AuditEntry.recorded_at.desc(), AuditEntry.id.desc()).all()
