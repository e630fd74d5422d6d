"""
Past-due sweep: moves active subscriptions whose due date has passed to
past_due. Safe to run repeatedly; trainers already swept are left alone.
"""
from datetime import date

from flask import current_app

from trainerhub.models import AuditAction, SubscriptionStatus, User

from .audit import AuditTrail
from .errors import Conflict
from .ledger import SubscriptionLedger
from .transactions import commit_atomically


def due_trainer_ids(today):
    """Ids of trainers whose active subscription ended before ``today``."""
    rows = User.query.with_entities(User.id).filter(
        User.is_trainer,
        User.subscription_status == SubscriptionStatus.ACTIVE.value,
        User.due_date.isnot(None),
        User.due_date < today,
    ).order_by(User.id).all()
    return [row.id for row in rows]


def sweep_past_due(today=None, ledger=None, audit=None):
    """
    Transition every overdue active subscription to past_due.

    Each trainer is handled in its own transaction; a trainer that keeps
    conflicting with concurrent writes is skipped and picked up next run.

    Args:
        today (date, optional): Reference date, defaults to today
        ledger (SubscriptionLedger, optional)
        audit (AuditTrail, optional)

    Returns:
        int: Number of subscriptions moved to past_due
    """
    today = today or date.today()
    ledger = ledger or SubscriptionLedger()
    audit = audit or AuditTrail()
    swept = 0

    for trainer_id in due_trainer_ids(today):
        def operation(trainer_id=trainer_id):
            subscription = ledger.mark_past_due(trainer_id, today)
            if subscription is not None:
                audit.record(AuditAction.PAST_DUE, None, trainer_id=trainer_id,
                             plan_id=subscription.plan_id, due_date=subscription.due_date)
            return subscription

        try:
            if commit_atomically(operation, f"past-due sweep of trainer {trainer_id}") is not None:
                swept += 1
        except Conflict:
            current_app.logger.warning("Skipping trainer %s in past-due sweep after conflicts", trainer_id)

    current_app.logger.info("Past-due sweep for %s moved %d subscription(s)", today, swept)
    return swept
