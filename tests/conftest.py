"""
Pytest configuration and fixtures.
"""
import os
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from trainerhub import create_app
from trainerhub.models import Plan, PlanType, User, UserRole


@pytest.fixture(scope="function")
def app():
    """
    Create a Flask application configured for testing.

    Every test gets a fresh in-memory database unless ``TEST_DATABASE_URI``
    points somewhere else.

    Returns:
        Flask: The Flask application instance.
    """
    os.environ["FLASK_ENV"] = "testing"
    app = create_app('testing')

    with app.app_context():
        from trainerhub import db

        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for the Flask application.

    Args:
        app: The Flask application fixture.

    Returns:
        FlaskClient: A test client for the Flask application.
    """
    return app.test_client()


@pytest.fixture(scope="function")
def db(app):
    """
    Fixture for the SQLAlchemy database object.

    Args:
        app: The Flask application fixture.

    Returns:
        SQLAlchemy db: The database object for testing.
    """
    from trainerhub import db as _db
    return _db


@pytest.fixture
def admin_user(db):
    """Create an administrator."""
    admin = User(name="Admin", email="admin@example.com", role=UserRole.ADMIN.value)
    db.session.add(admin)
    db.session.commit()
    return admin


@pytest.fixture
def admin_token(admin_user):
    """Create an access token with the admin claim."""
    return create_access_token(identity=str(admin_user.id), additional_claims={"is_admin": True})


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def trainer(db):
    """Create a trainer without a subscription."""
    trainer = User(name="Tess Trainer", email="tess@example.com")
    db.session.add(trainer)
    db.session.commit()
    return trainer


@pytest.fixture
def pro_plan(db):
    """Public plan priced 100.00 monthly and 960.00 annually."""
    plan = Plan(
        name="Pro",
        monthly_price=Decimal("100.00"),
        annual_price=Decimal("960.00"),
        max_students=50,
        features=["Workout builder", "Progress reports"],
        visible_on_landing=True,
        display_order=0,
    )
    db.session.add(plan)
    db.session.commit()
    return plan


@pytest.fixture
def founder_plan(db):
    """Lifetime plan."""
    plan = Plan(
        name="Founder",
        monthly_price=Decimal("0"),
        plan_type=PlanType.LIFETIME.value,
        features=["Everything"],
        display_order=1,
    )
    db.session.add(plan)
    db.session.commit()
    return plan
