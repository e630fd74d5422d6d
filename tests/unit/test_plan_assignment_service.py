"""
Unit tests for the plan assignment service.
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from trainerhub.models import (AuditAction, AuditEntry, SubscriptionHistoryEntry,
                               SubscriptionStatus, User)
from trainerhub.services.assignment import PlanAssignmentService
from trainerhub.services.catalog import PlanCatalog
from trainerhub.services.errors import (Conflict, NoActiveSubscription, PlanInUse,
                                        TrainerNotFound, Unauthorized)


@pytest.fixture
def service():
    return PlanAssignmentService()


@pytest.fixture
def second_trainer(db):
    trainer = User(name="Theo Trainer", email="theo@example.com")
    db.session.add(trainer)
    db.session.commit()
    return trainer


def _history(trainer_id):
    return SubscriptionHistoryEntry.query.filter_by(trainer_id=trainer_id).all()


def test_scenarios_end_to_end(service, admin_user, trainer, second_trainer, pro_plan, founder_plan):
    """Walk through assignment, lifetime override, cancellation and delete refusal."""
    # Monthly with 10% discount
    subscription = service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly", 10,
                                       date(2024, 1, 15))
    assert subscription.status is SubscriptionStatus.ACTIVE
    assert subscription.due_date == date(2024, 2, 15)
    assert service.get_plan_history(admin_user.id, trainer.id)[0].final_monthly_price == Decimal("90.00")

    # Annual without discount on another trainer
    annual = service.assign_plan(admin_user.id, second_trainer.id, pro_plan.id, "annual", 0,
                                 date(2024, 1, 15))
    assert annual.due_date == date(2025, 1, 15)
    assert service.get_plan_history(admin_user.id, second_trainer.id)[0].final_annual_price == Decimal("960.00")

    # Lifetime plan forces period and discount
    lifetime = service.assign_plan(admin_user.id, second_trainer.id, founder_plan.id, "annual", 40,
                                   date(2024, 1, 15))
    assert lifetime.discount_percent == Decimal("0")
    assert lifetime.due_date is None
    assert lifetime.status is SubscriptionStatus.LIFETIME

    # Cancel at period end
    canceled = service.cancel_plan(admin_user.id, trainer.id, reason="Moving gyms", immediate=False,
                                   today=date(2024, 1, 20))
    assert canceled.status is SubscriptionStatus.CANCELED
    assert canceled.due_date == date(2024, 2, 15)
    assert canceled.cancellation_reason == "Moving gyms"

    # Cancel again
    with pytest.raises(NoActiveSubscription):
        service.cancel_plan(admin_user.id, trainer.id, today=date(2024, 1, 21))
    assert len(_history(trainer.id)) == 2

    # Plan still referenced by the canceled trainer
    with pytest.raises(PlanInUse):
        PlanCatalog().delete(admin_user.id, pro_plan.id)


def test_history_grows_by_one_per_mutation(service, admin_user, trainer, pro_plan):
    lengths = [len(service.get_plan_history(admin_user.id, trainer.id))]
    service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    lengths.append(len(service.get_plan_history(admin_user.id, trainer.id)))
    first = service.get_plan_history(admin_user.id, trainer.id)[0].to_dict()
    service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "annual", 5, date(2024, 2, 1))
    lengths.append(len(service.get_plan_history(admin_user.id, trainer.id)))
    service.cancel_plan(admin_user.id, trainer.id, immediate=True, today=date(2024, 2, 2))
    lengths.append(len(service.get_plan_history(admin_user.id, trainer.id)))

    assert lengths == [0, 1, 2, 3]
    assert service.get_plan_history(admin_user.id, trainer.id)[-1].to_dict() == first


def test_every_mutation_is_audited(service, admin_user, trainer, pro_plan):
    service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly", 10, date(2024, 1, 15))
    service.cancel_plan(admin_user.id, trainer.id, reason="done", today=date(2024, 1, 20))

    cancel_entry, assign_entry = AuditEntry.query.order_by(AuditEntry.id.desc()).all()
    assert assign_entry.action == AuditAction.ASSIGN.value
    assert assign_entry.actor_id == admin_user.id
    assert assign_entry.trainer_id == trainer.id
    assert assign_entry.plan_id == pro_plan.id
    assert assign_entry.details['discount_percent'] == 10.0
    assert assign_entry.details['due_date'] == "2024-02-15"
    assert cancel_entry.action == AuditAction.CANCEL.value
    assert cancel_entry.details['reason'] == "done"


def test_non_admin_is_refused_before_lookup(service, trainer, pro_plan):
    """Test a non-admin learns nothing, even about unknown trainers."""
    with pytest.raises(Unauthorized):
        service.assign_plan(trainer.id, trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    with pytest.raises(Unauthorized):
        service.assign_plan(trainer.id, 9999, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    with pytest.raises(Unauthorized):
        service.cancel_plan(None, trainer.id)
    with pytest.raises(Unauthorized):
        service.get_plan_history("not-an-id", trainer.id)
    assert _history(trainer.id) == []
    assert AuditEntry.query.count() == 0


def test_actor_id_from_token_identity(service, admin_user, trainer, pro_plan):
    subscription = service.assign_plan(str(admin_user.id), trainer.id, pro_plan.id, "monthly", 0,
                                       date(2024, 1, 15))
    assert subscription.plan_id == pro_plan.id
    assert AuditEntry.query.one().actor_id == admin_user.id


def test_unknown_trainer(service, admin_user, pro_plan):
    with pytest.raises(TrainerNotFound):
        service.assign_plan(admin_user.id, 9999, pro_plan.id, "monthly", 0, date(2024, 1, 15))
    assert AuditEntry.query.count() == 0


def test_start_date_defaults_to_today(service, admin_user, trainer, pro_plan):
    subscription = service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly")
    assert subscription.start_date == date.today()


def test_concurrent_write_is_retried(service, db, monkeypatch, admin_user, trainer, pro_plan):
    """Test a version conflict on the trainer row is retried and written once."""
    apply_assignment = service.ledger.apply_assignment
    calls = []

    def racing_assignment(trainer_id, *args):
        calls.append(trainer_id)
        if len(calls) == 1:
            # Load the row, then let another writer bump its version
            db.session.get(User, trainer_id)
            db.session.execute(
                text("UPDATE users SET version_id = version_id + 1 WHERE id = :id"), {"id": trainer_id}
            )
        return apply_assignment(trainer_id, *args)

    monkeypatch.setattr(service.ledger, "apply_assignment", racing_assignment)

    subscription = service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly", 0,
                                       date(2024, 1, 15))

    assert len(calls) == 2
    assert subscription.status is SubscriptionStatus.ACTIVE
    assert len(_history(trainer.id)) == 1
    assert AuditEntry.query.count() == 1


def test_conflict_after_exhausting_retries(service, app, monkeypatch, admin_user, trainer, pro_plan):
    calls = []

    def always_stale(*args):
        calls.append(args)
        raise StaleDataError("row was updated concurrently")

    monkeypatch.setattr(service.ledger, "apply_assignment", always_stale)

    with pytest.raises(Conflict):
        service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))

    assert len(calls) == app.config['SUBSCRIPTION_WRITE_RETRIES']
    assert _history(trainer.id) == []
    assert AuditEntry.query.count() == 0


def test_constraint_failure_becomes_conflict(service, monkeypatch, admin_user, trainer, pro_plan):
    """Test a foreign key failure from a concurrent plan delete is reported as a conflict."""
    calls = []

    def plan_deleted_meanwhile(*args):
        calls.append(args)
        raise IntegrityError("INSERT INTO subscription_history", {},
                             Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(service.ledger, "apply_assignment", plan_deleted_meanwhile)

    with pytest.raises(Conflict):
        service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 15))

    assert len(calls) == 1
    assert _history(trainer.id) == []
    assert AuditEntry.query.count() == 0


def test_expiring_subscriptions(service, app, admin_user, trainer, second_trainer, pro_plan):
    service.assign_plan(admin_user.id, trainer.id, pro_plan.id, "monthly", 0, date(2024, 1, 10))
    service.assign_plan(admin_user.id, second_trainer.id, pro_plan.id, "annual", 0, date(2024, 1, 10))

    expiring = service.expiring_subscriptions(admin_user.id, today=date(2024, 2, 5))

    assert app.config['EXPIRING_WINDOW_DAYS'] == 7
    assert [s.trainer_id for s in expiring] == [trainer.id]
    assert service.expiring_subscriptions(admin_user.id, days_ahead=0, today=date(2024, 2, 10))[0].trainer_id == trainer.id
