"""
Subscription ledger: the current subscription of each trainer and its history.

The current state lives denormalized on the trainer's ``users`` row; every
status-affecting change also appends one ``SubscriptionHistoryEntry``. The
ledger only stages changes in the session; callers commit through
``commit_atomically`` so projection and history land together.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from trainerhub import db
from trainerhub.models import (BillingPeriod, Plan, PlanType, SubscriptionHistoryEntry,
                               SubscriptionStatus, User)
from trainerhub.models.base import utcnow

from .cancellation import resolve_cancellation
from .errors import (PeriodInvalidForPlanType, PlanInactive, PlanNotFound,
                     TrainerNotFound)
from .periods import next_due_date
from .pricing import compute_final_price, select_base_price
from .validation import coerce_bool, coerce_date, coerce_discount, coerce_enum, coerce_optional_text

RECURRING_PERIODS = (BillingPeriod.MONTHLY, BillingPeriod.ANNUAL)


@dataclass(frozen=True)
class Subscription:
    """Read-only snapshot of a trainer's current subscription."""
    trainer_id: int
    plan_id: Optional[int]
    period: BillingPeriod
    discount_percent: Decimal
    start_date: Optional[date]
    due_date: Optional[date]
    status: SubscriptionStatus
    cancellation_reason: Optional[str]

    @classmethod
    def from_trainer(cls, trainer):
        return cls(
            trainer_id=trainer.id,
            plan_id=trainer.plan_id,
            period=BillingPeriod(trainer.period),
            discount_percent=Decimal(trainer.discount_percent),
            start_date=trainer.subscription_start,
            due_date=trainer.due_date,
            status=SubscriptionStatus(trainer.subscription_status),
            cancellation_reason=trainer.cancellation_reason,
        )

    def to_dict(self):
        return {
            'trainer_id': self.trainer_id,
            'plan_id': self.plan_id,
            'period': self.period.value,
            'discount_percent': self.discount_percent,
            'start_date': self.start_date,
            'due_date': self.due_date,
            'status': self.status.value,
            'cancellation_reason': self.cancellation_reason,
        }


class SubscriptionLedger:
    """Reads and stages writes of trainer subscriptions."""

    def _load_trainer(self, trainer_id):
        trainer = db.session.get(User, trainer_id) if trainer_id is not None else None
        if trainer is None or not trainer.is_trainer:
            raise TrainerNotFound(trainer_id=trainer_id)
        return trainer

    def get_current(self, trainer_id):
        """Return the trainer's current ``Subscription``."""
        return Subscription.from_trainer(self._load_trainer(trainer_id))

    def get_history(self, trainer_id):
        """
        Iterate over the trainer's history, most recent first.

        Returns a one-shot iterator; call again for a fresh pass.
        """
        self._load_trainer(trainer_id)
        query = SubscriptionHistoryEntry.query.filter_by(trainer_id=trainer_id).order_by(
            SubscriptionHistoryEntry.recorded_at.desc(),
            SubscriptionHistoryEntry.id.desc(),
        )
        return iter(query.all())

    def latest_entry(self, trainer_id):
        return SubscriptionHistoryEntry.query.filter_by(trainer_id=trainer_id).order_by(
            SubscriptionHistoryEntry.recorded_at.desc(),
            SubscriptionHistoryEntry.id.desc(),
        ).first()

    def apply_assignment(self, trainer_id, plan_id, period, discount_percent, start_date):
        """
        Put a trainer on a plan, replacing whatever subscription was current.

        Lifetime plans force ``period=lifetime`` and ``discount_percent=0``
        whatever was requested. Public plans accept monthly or annual, and
        annual only when the plan has an annual price. No proration: price and
        due date are computed from scratch.

        Returns:
            Subscription: The new current subscription

        Raises:
            TrainerNotFound, PlanNotFound, PlanInactive, PeriodInvalidForPlanType,
            ValidationFailed
        """
        start_date = coerce_date(start_date, 'start_date')
        trainer = self._load_trainer(trainer_id)
        plan = db.session.get(Plan, plan_id) if plan_id is not None else None
        if plan is None:
            raise PlanNotFound(plan_id=plan_id)
        if not plan.active:
            raise PlanInactive(plan_id=plan_id)

        if PlanType(plan.plan_type) is PlanType.LIFETIME:
            period = BillingPeriod.LIFETIME
            discount = Decimal('0')
            status = SubscriptionStatus.LIFETIME
        else:
            period = coerce_enum(BillingPeriod, period, 'period')
            if period not in RECURRING_PERIODS:
                raise PeriodInvalidForPlanType(
                    "Public plans are billed monthly or annually",
                    plan_id=plan.id, period=period.value,
                )
            if period is BillingPeriod.ANNUAL and plan.annual_price is None:
                raise PeriodInvalidForPlanType(
                    "Plan has no annual price", plan_id=plan.id, period=period.value,
                )
            discount = coerce_discount(discount_percent)
            status = SubscriptionStatus.ACTIVE

        final_price = compute_final_price(select_base_price(plan, period), discount)
        due_date = next_due_date(start_date, period)

        trainer.plan = plan
        trainer.plan_id = plan.id
        trainer.period = period.value
        trainer.discount_percent = discount
        trainer.subscription_start = start_date
        trainer.due_date = due_date
        trainer.subscription_status = status.value
        trainer.cancellation_reason = None

        self._append_entry(
            trainer, plan_name=plan.name,
            final_monthly_price=None if period is BillingPeriod.ANNUAL else final_price,
            final_annual_price=final_price if period is BillingPeriod.ANNUAL else None,
        )
        return Subscription.from_trainer(trainer)

    def apply_cancellation(self, trainer_id, reason=None, immediate=False, today=None):
        """
        Cancel the trainer's subscription following the cancellation policy.

        Raises:
            TrainerNotFound, NoActiveSubscription, ValidationFailed
        """
        reason = coerce_optional_text(reason, 'reason', 255)
        immediate = coerce_bool(immediate, 'cancel_immediately')
        today = coerce_date(today or date.today(), 'today')
        trainer = self._load_trainer(trainer_id)

        outcome = resolve_cancellation(
            SubscriptionStatus(trainer.subscription_status), trainer.due_date, immediate, today
        )
        trainer.subscription_status = outcome.status.value
        trainer.due_date = outcome.due_date
        trainer.cancellation_reason = reason

        self._append_carried_entry(trainer)
        return Subscription.from_trainer(trainer)

    def mark_past_due(self, trainer_id, today):
        """
        Move an active subscription whose due date has passed to past_due.

        Returns:
            Subscription or None: None when the trainer is not due, which makes
            repeated sweeps harmless
        """
        trainer = self._load_trainer(trainer_id)
        if (trainer.subscription_status != SubscriptionStatus.ACTIVE.value
                or trainer.due_date is None or trainer.due_date >= today):
            return None
        trainer.subscription_status = SubscriptionStatus.PAST_DUE.value
        self._append_carried_entry(trainer)
        return Subscription.from_trainer(trainer)

    def expiring(self, today, days_ahead):
        """Active subscriptions whose due date falls within ``days_ahead`` days."""
        horizon = today + timedelta(days=days_ahead)
        trainers = User.query.filter(
            User.is_trainer,
            User.subscription_status == SubscriptionStatus.ACTIVE.value,
            User.due_date.isnot(None),
            User.due_date >= today,
            User.due_date <= horizon,
        ).order_by(User.due_date, User.id).all()
        return [Subscription.from_trainer(trainer) for trainer in trainers]

    def _append_carried_entry(self, trainer):
        """Append an entry that keeps the prices of the latest one."""
        latest = self.latest_entry(trainer.id)
        plan_name = trainer.plan.name if trainer.plan is not None else None
        self._append_entry(
            trainer,
            plan_name=plan_name or (latest.plan_name if latest else None),
            final_monthly_price=latest.final_monthly_price if latest else None,
            final_annual_price=latest.final_annual_price if latest else None,
        )

    def _append_entry(self, trainer, plan_name, final_monthly_price, final_annual_price):
        entry = SubscriptionHistoryEntry(
            trainer_id=trainer.id,
            plan_id=trainer.plan_id,
            plan_name=plan_name,
            period=trainer.period,
            discount_percent=trainer.discount_percent,
            start_date=trainer.subscription_start,
            due_date=trainer.due_date,
            status=trainer.subscription_status,
            final_monthly_price=final_monthly_price,
            final_annual_price=final_annual_price,
            cancellation_reason=trainer.cancellation_reason,
            recorded_at=utcnow(),
        )
        db.session.add(entry)
        return entry
