"""
Plan assignment service: the administrator-facing entry point for putting
trainers on plans and taking them off again.

Every mutation authorizes the actor first, then writes the trainer's
projection, one history entry and one audit entry in a single transaction.
"""
from datetime import date

from flask import current_app

from trainerhub.models import AuditAction

from .audit import AuditTrail
from .authorization import require_admin
from .errors import SubscriptionError, ValidationFailed
from .ledger import SubscriptionLedger
from .transactions import commit_atomically
from .validation import coerce_date, coerce_int


class PlanAssignmentService:
    """Assigns, cancels and reports trainer subscriptions."""

    def __init__(self, ledger=None, audit=None):
        self.ledger = ledger or SubscriptionLedger()
        self.audit = audit or AuditTrail()

    def assign_plan(self, actor_id, trainer_id, plan_id, period, discount_percent=0, start_date=None):
        """
        Put a trainer on a plan starting at ``start_date`` (today by default).

        Args:
            actor_id: Administrator performing the assignment
            trainer_id (int): Trainer to assign
            plan_id (int): Target plan
            period (BillingPeriod or str): Requested billing period; ignored
                for lifetime plans
            discount_percent: Discount in [0, 100]
            start_date (date or str, optional): First day of the period

        Returns:
            Subscription: The trainer's new subscription

        Raises:
            Unauthorized, TrainerNotFound, PlanNotFound, PlanInactive,
            PeriodInvalidForPlanType, ValidationFailed, Conflict
        """
        require_admin(actor_id)
        start_date = start_date if start_date is not None else date.today()

        def operation():
            subscription = self.ledger.apply_assignment(
                trainer_id, plan_id, period, discount_percent, start_date
            )
            self.audit.record(
                AuditAction.ASSIGN, int(actor_id),
                trainer_id=subscription.trainer_id, plan_id=subscription.plan_id,
                period=subscription.period, discount_percent=subscription.discount_percent,
                start_date=subscription.start_date, due_date=subscription.due_date,
            )
            return subscription

        try:
            subscription = commit_atomically(operation, f"assignment of trainer {trainer_id}")
        except SubscriptionError as e:
            current_app.logger.warning("Assignment of plan %s to trainer %s refused: %s (%s)",
                                       plan_id, trainer_id, e.kind, e.message)
            raise

        current_app.logger.info(
            "Admin %s assigned plan %s to trainer %s (period=%s, status=%s, due=%s)",
            actor_id, subscription.plan_id, subscription.trainer_id,
            subscription.period.value, subscription.status.value, subscription.due_date,
        )
        return subscription

    def cancel_plan(self, actor_id, trainer_id, reason=None, immediate=False, today=None):
        """
        Cancel a trainer's subscription, now or at the end of the period.

        Raises:
            Unauthorized, TrainerNotFound, NoActiveSubscription,
            ValidationFailed, Conflict
        """
        require_admin(actor_id)
        today = today if today is not None else date.today()

        def operation():
            subscription = self.ledger.apply_cancellation(trainer_id, reason, immediate, today)
            self.audit.record(
                AuditAction.CANCEL, int(actor_id),
                trainer_id=subscription.trainer_id, plan_id=subscription.plan_id,
                reason=subscription.cancellation_reason, immediate=immediate,
                due_date=subscription.due_date,
            )
            return subscription

        try:
            subscription = commit_atomically(operation, f"cancellation of trainer {trainer_id}")
        except SubscriptionError as e:
            current_app.logger.warning("Cancellation for trainer %s refused: %s (%s)",
                                       trainer_id, e.kind, e.message)
            raise

        current_app.logger.info(
            "Admin %s canceled subscription of trainer %s (immediate=%s, due=%s)",
            actor_id, subscription.trainer_id, immediate, subscription.due_date,
        )
        return subscription

    def get_current_subscription(self, actor_id, trainer_id):
        require_admin(actor_id)
        return self.ledger.get_current(trainer_id)

    def get_plan_history(self, actor_id, trainer_id):
        """
        Return the trainer's subscription history, most recent first.

        Raises:
            Unauthorized, TrainerNotFound
        """
        require_admin(actor_id)
        return list(self.ledger.get_history(trainer_id))

    def expiring_subscriptions(self, actor_id, days_ahead=None, today=None):
        """
        Active subscriptions whose due date falls in the next ``days_ahead`` days.

        ``days_ahead`` defaults to ``EXPIRING_WINDOW_DAYS``.
        """
        require_admin(actor_id)
        if days_ahead is None:
            days_ahead = current_app.config.get('EXPIRING_WINDOW_DAYS', 7)
        days_ahead = coerce_int(days_ahead, 'days')
        if days_ahead < 0:
            raise ValidationFailed("days must not be negative", field='days', value=days_ahead)
        today = coerce_date(today if today is not None else date.today(), 'today')
        return self.ledger.expiring(today, days_ahead)
