"""
Unit tests for the subscription ledger.
"""
from datetime import date
from decimal import Decimal

import pytest

from trainerhub.models import (BillingPeriod, SubscriptionHistoryEntry, SubscriptionStatus,
                               User, UserRole)
from trainerhub.services.errors import (NoActiveSubscription, PeriodInvalidForPlanType,
                                        PlanInactive, PlanNotFound, TrainerNotFound,
                                        ValidationFailed)
from trainerhub.services.ledger import SubscriptionLedger
from trainerhub.services.pricing import compute_final_price


@pytest.fixture
def ledger():
    return SubscriptionLedger()


def test_new_trainer_has_pending_subscription(ledger, trainer):
    subscription = ledger.get_current(trainer.id)

    assert subscription.plan_id is None
    assert subscription.period is BillingPeriod.NONE
    assert subscription.status is SubscriptionStatus.PENDING
    assert subscription.due_date is None
    assert list(ledger.get_history(trainer.id)) == []


def test_monthly_assignment(ledger, db, trainer, pro_plan):
    """Test a discounted monthly assignment prices and dates the subscription."""
    subscription = ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 10, date(2024, 1, 15))
    db.session.commit()

    assert subscription.status is SubscriptionStatus.ACTIVE
    assert subscription.period is BillingPeriod.MONTHLY
    assert subscription.due_date == date(2024, 2, 15)
    assert subscription.discount_percent == Decimal("10")

    [entry] = ledger.get_history(trainer.id)
    assert entry.plan_name == "Pro"
    assert entry.final_monthly_price == Decimal("90.00")
    assert entry.final_annual_price is None


def test_annual_assignment(ledger, db, trainer, pro_plan):
    subscription = ledger.apply_assignment(trainer.id, pro_plan.id, BillingPeriod.ANNUAL, 0,
                                           "2024-01-15")
    db.session.commit()

    assert subscription.due_date == date(2025, 1, 15)
    [entry] = ledger.get_history(trainer.id)
    assert entry.final_annual_price == Decimal("960.00")
    assert entry.final_monthly_price is None


@pytest.mark.parametrize("period, discount", [
    ("monthly", 50), ("annual", 0), ("lifetime", 99), (None, None), ("bogus", "not a number"),
])
def test_lifetime_assignment_overrides_period_and_discount(ledger, db, trainer, founder_plan,
                                                           period, discount):
    subscription = ledger.apply_assignment(trainer.id, founder_plan.id, period, discount,
                                           date(2024, 1, 15))
    db.session.commit()

    assert subscription.period is BillingPeriod.LIFETIME
    assert subscription.discount_percent == Decimal("0")
    assert subscription.due_date is None
    assert subscription.status is SubscriptionStatus.LIFETIME
    [entry] = ledger.get_history(trainer.id)
    assert entry.final_monthly_price == Decimal("0.00")


def test_annual_requires_annual_price(ledger, db, trainer, pro_plan):
    pro_plan.annual_price = None
    db.session.commit()

    with pytest.raises(PeriodInvalidForPlanType):
        ledger.apply_assignment(trainer.id, pro_plan.id, "annual", 0, date(2024, 1, 15))


@pytest.mark.parametrize("period", ["lifetime", "none"])
def test_public_plan_rejects_non_recurring_period(ledger, trainer, pro_plan, period):
    with pytest.raises(PeriodInvalidForPlanType):
        ledger.apply_assignment(trainer.id, pro_plan.id, period, 0, date(2024, 1, 15))


@pytest.mark.parametrize("discount", [-5, 101, "12.345"])
def test_invalid_discount_leaves_no_trace(ledger, db, trainer, pro_plan, discount):
    with pytest.raises(ValidationFailed):
        ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", discount, date(2024, 1, 15))
    db.session.rollback()

    assert ledger.get_current(trainer.id).status is SubscriptionStatus.PENDING
    assert SubscriptionHistoryEntry.query.count() == 0


def test_stored_discount_matches_stored_price(ledger, db, trainer, pro_plan):
    """Test the discount and price read back from the database agree."""
    ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 12.34, date(2024, 1, 15))
    db.session.commit()
    db.session.expire_all()

    assert db.session.get(User, trainer.id).discount_percent == Decimal("12.34")
    [entry] = ledger.get_history(trainer.id)
    assert entry.discount_percent == Decimal("12.34")
    assert entry.final_monthly_price == Decimal("87.66")
    assert entry.final_monthly_price == compute_final_price(pro_plan.monthly_price, entry.discount_percent)
    assert ledger.get_current(trainer.id).discount_percent == Decimal("12.34")


def test_unknown_and_inactive_targets(ledger, db, trainer, pro_plan, admin_user):
    with pytest.raises(TrainerNotFound):
        ledger.apply_assignment(9999, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    with pytest.raises(TrainerNotFound):
        # Administrators carry no subscription
        ledger.get_current(admin_user.id)
    with pytest.raises(PlanNotFound):
        ledger.apply_assignment(trainer.id, 9999, "monthly", 0, date(2024, 1, 15))

    pro_plan.active = False
    db.session.commit()
    with pytest.raises(PlanInactive):
        ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))


def test_reassignment_recomputes_from_scratch(ledger, db, trainer, pro_plan, founder_plan):
    ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 10, date(2024, 1, 15))
    db.session.commit()
    ledger.apply_cancellation(trainer.id, "pausing", False, date(2024, 1, 20))
    db.session.commit()

    subscription = ledger.apply_assignment(trainer.id, pro_plan.id, "annual", 0, date(2024, 3, 1))
    db.session.commit()

    assert subscription.status is SubscriptionStatus.ACTIVE
    assert subscription.due_date == date(2025, 3, 1)
    assert subscription.cancellation_reason is None
    assert len(list(ledger.get_history(trainer.id))) == 3


def test_cancellation_keeps_due_date_and_prices(ledger, db, trainer, pro_plan):
    ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 10, date(2024, 1, 15))
    db.session.commit()

    subscription = ledger.apply_cancellation(trainer.id, "  Moving gyms ", False, date(2024, 1, 20))
    db.session.commit()

    assert subscription.status is SubscriptionStatus.CANCELED
    assert subscription.due_date == date(2024, 2, 15)
    assert subscription.cancellation_reason == "Moving gyms"

    latest, first = ledger.get_history(trainer.id)
    assert latest.status == SubscriptionStatus.CANCELED.value
    assert latest.final_monthly_price == Decimal("90.00")
    assert first.status == SubscriptionStatus.ACTIVE.value
    assert first.cancellation_reason is None


def test_second_cancellation_fails_without_writing(ledger, db, trainer, pro_plan):
    ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    ledger.apply_cancellation(trainer.id, None, True, date(2024, 1, 20))
    db.session.commit()

    with pytest.raises(NoActiveSubscription):
        ledger.apply_cancellation(trainer.id, None, False, date(2024, 1, 21))
    db.session.rollback()

    assert SubscriptionHistoryEntry.query.filter_by(trainer_id=trainer.id).count() == 2


def test_cancel_without_subscription(ledger, trainer):
    with pytest.raises(NoActiveSubscription):
        ledger.apply_cancellation(trainer.id, None, False, date(2024, 1, 21))


def test_mark_past_due(ledger, db, trainer, pro_plan):
    ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    db.session.commit()

    assert ledger.mark_past_due(trainer.id, date(2024, 2, 15)) is None
    subscription = ledger.mark_past_due(trainer.id, date(2024, 2, 16))
    db.session.commit()

    assert subscription.status is SubscriptionStatus.PAST_DUE
    assert ledger.mark_past_due(trainer.id, date(2024, 2, 17)) is None
    assert len(list(ledger.get_history(trainer.id))) == 2


def test_history_is_one_shot_and_newest_first(ledger, db, trainer, pro_plan):
    ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    db.session.commit()
    ledger.apply_assignment(trainer.id, pro_plan.id, "annual", 0, date(2024, 1, 16))
    db.session.commit()

    history = ledger.get_history(trainer.id)
    assert [entry.period for entry in history] == ["annual", "monthly"]
    assert list(history) == []


def test_expiring(ledger, db, pro_plan):
    trainers = []
    for index, start in enumerate([date(2024, 1, 10), date(2024, 1, 20), date(2023, 12, 1)]):
        trainer = User(name=f"Trainer {index}", email=f"t{index}@example.com", role=UserRole.TRAINER.value)
        db.session.add(trainer)
        db.session.commit()
        ledger.apply_assignment(trainer.id, pro_plan.id, "monthly", 0, start)
        db.session.commit()
        trainers.append(trainer)

    expiring = ledger.expiring(date(2024, 2, 8), 7)

    assert [subscription.trainer_id for subscription in expiring] == [trainers[0].id]
    assert [s.trainer_id for s in ledger.expiring(date(2024, 2, 8), 14)] == [trainers[0].id, trainers[1].id]
