#!/usr/bin/env python
"""
Script to seed the plan catalog with sample plans.
"""
import sys

from trainerhub import create_app
from trainerhub.models import Plan, User, UserRole
from trainerhub.services.catalog import PlanCatalog

SAMPLE_PLANS = [
    {
        'name': 'Starter',
        'description': 'For trainers getting started',
        'monthly_price': '49.90',
        'annual_price': '499.00',
        'max_students': 10,
        'features': ['Workout builder', 'Student app'],
        'visible_on_landing': True,
    },
    {
        'name': 'Pro',
        'description': 'For established trainers',
        'monthly_price': '99.90',
        'annual_price': '999.00',
        'max_students': 50,
        'features': ['Workout builder', 'Student app', 'Progress reports'],
        'visible_on_landing': True,
    },
    {
        'name': 'Studio',
        'description': 'Unlimited students for studios',
        'monthly_price': '199.90',
        'max_students': 0,
        'features': ['Workout builder', 'Student app', 'Progress reports', 'Team accounts'],
        'visible_on_landing': True,
    },
    {
        'name': 'Founder',
        'description': 'Lifetime access for early adopters',
        'plan_type': 'lifetime',
        'monthly_price': '0',
        'max_students': 0,
        'features': ['Everything in Studio'],
    },
]


def create_sample_plans():
    """Create sample plans if they don't already exist."""
    admin = User.query.filter_by(role=UserRole.ADMIN.value).order_by(User.id).first()
    if admin is None:
        print("Error: no administrator found. Run create_admin.py first.")
        return

    existing_plan_names = {plan.name for plan in Plan.query.all()}
    print(f"Found existing plans: {sorted(existing_plan_names)}")

    catalog = PlanCatalog()
    created = 0
    for fields in SAMPLE_PLANS:
        if fields['name'] in existing_plan_names:
            continue
        plan = catalog.create(admin.id, fields)
        print(f"- {plan.name} ({plan.plan_type}, ${plan.monthly_price})")
        created += 1

    print(f"Created {created} new plan(s)")


if __name__ == "__main__":
    try:
        app = create_app('development')
        with app.app_context():
            create_sample_plans()

        print("Sample plans creation completed successfully.")
        sys.exit(0)
    except Exception as e:
        print(f"Error creating sample plans: {str(e)}")
        sys.exit(1)
