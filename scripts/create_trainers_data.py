#!/usr/bin/env python
"""
Script to create demo trainers with a mix of subscription scenarios:
- trainers on monthly and annual public plans, some with discounts
- trainers on the lifetime plan
- trainers due within the next week
- recent cancellations, immediate and at period end
"""
import random
import sys
from datetime import date, timedelta

from faker import Faker

from trainerhub import create_app, db
from trainerhub.models import BillingPeriod, Plan, User, UserRole
from trainerhub.services.assignment import PlanAssignmentService

# Initialize faker for generating realistic trainer data
fake = Faker()

TOTAL_TRAINERS = 200
LIFETIME_SHARE = 0.05
EXPIRING_SOON_SHARE = 0.15
CANCELED_SHARE = 0.10
DISCOUNTS = [0, 0, 0, 10, 15, 25]


def create_trainers_data():
    """Create demo trainers and put them on plans through the assignment service."""
    admin = User.query.filter_by(role=UserRole.ADMIN.value).order_by(User.id).first()
    if admin is None:
        print("Error: no administrator found. Run create_admin.py first.")
        return

    plans = Plan.query.filter_by(active=True).all()
    public_plans = [plan for plan in plans if not plan.is_lifetime]
    lifetime_plans = [plan for plan in plans if plan.is_lifetime]
    if not public_plans:
        print("Error: no active public plans found. Run create_sample_plans.py first.")
        return

    service = PlanAssignmentService()
    today = date.today()
    counters = {'assigned': 0, 'lifetime': 0, 'expiring': 0, 'canceled': 0}

    for index in range(TOTAL_TRAINERS):
        trainer = User(name=fake.name(), email=f"{index}.{fake.unique.email()}",
                       role=UserRole.TRAINER.value)
        db.session.add(trainer)
        db.session.commit()

        roll = random.random()
        if lifetime_plans and roll < LIFETIME_SHARE:
            service.assign_plan(admin.id, trainer.id, random.choice(lifetime_plans).id,
                                BillingPeriod.LIFETIME, start_date=today - timedelta(days=random.randint(0, 700)))
            counters['lifetime'] += 1
            continue

        plan = random.choice(public_plans)
        period = BillingPeriod.ANNUAL if plan.annual_price is not None and random.random() < 0.3 \
            else BillingPeriod.MONTHLY
        if roll < LIFETIME_SHARE + EXPIRING_SOON_SHARE:
            # Monthly subscriptions started about a month ago fall due within a week
            period = BillingPeriod.MONTHLY
            start = today - timedelta(days=random.randint(24, 29))
            counters['expiring'] += 1
        else:
            start = today - timedelta(days=random.randint(0, 20))

        service.assign_plan(admin.id, trainer.id, plan.id, period,
                            discount_percent=random.choice(DISCOUNTS), start_date=start)
        counters['assigned'] += 1

        if random.random() < CANCELED_SHARE:
            service.cancel_plan(admin.id, trainer.id, reason=fake.sentence(nb_words=6),
                                immediate=random.random() < 0.5)
            counters['canceled'] += 1

    print(f"Created {TOTAL_TRAINERS} trainers: {counters}")


if __name__ == "__main__":
    try:
        app = create_app('development')
        with app.app_context():
            create_trainers_data()
        sys.exit(0)
    except Exception as e:
        print(f"Error creating trainer data: {str(e)}")
        sys.exit(1)
