"""
Plan model for the catalog of priced tiers offered to trainers.
"""
from sqlalchemy import Index

from trainerhub import db

from .base import BaseModel
from .enums import PlanType


class Plan(BaseModel):
    """
    Plan model defining price, limits and entitlements of a tier.

    Attributes:
        name (str): Plan name (e.g., "Pro", "Founder")
        description (str): Optional plan description
        plan_type (str): "public" or "lifetime"
        monthly_price (Decimal): Monthly price, 0 for lifetime plans
        annual_price (Decimal): Optional annual price
        max_students (int): Student limit, 0 means unlimited
        features (list): Ordered list of feature labels
        active (bool): Whether the plan can be assigned
        visible_on_landing (bool): Whether the plan is shown publicly
        display_order (int): Sort key for listings
    """
    __tablename__ = 'plans'

    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    plan_type = db.Column(db.String(20), nullable=False, default=PlanType.PUBLIC.value)
    monthly_price = db.Column(db.Numeric(10, 2), nullable=False)
    annual_price = db.Column(db.Numeric(10, 2), nullable=True)
    max_students = db.Column(db.Integer, nullable=False, default=0)
    features = db.Column(db.JSON, nullable=False, default=list)
    active = db.Column(db.Boolean, nullable=False, default=True)
    visible_on_landing = db.Column(db.Boolean, nullable=False, default=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    trainers = db.relationship('User', back_populates='plan', lazy='dynamic')

    __table_args__ = (
        Index('idx_plan_active', 'active'),
        Index('idx_plan_landing', 'active', 'visible_on_landing'),
        Index('idx_plan_display_order', 'display_order'),
    )

    def __init__(self, name, monthly_price, plan_type=PlanType.PUBLIC.value,
                 description=None, annual_price=None, max_students=0,
                 features=None, active=True, visible_on_landing=False,
                 display_order=0):
        self.name = name
        self.description = description
        self.plan_type = plan_type
        self.monthly_price = monthly_price
        self.annual_price = annual_price
        self.max_students = max_students
        self.features = list(features or [])
        self.active = active
        self.visible_on_landing = visible_on_landing
        self.display_order = display_order

    @property
    def is_lifetime(self):
        return self.plan_type == PlanType.LIFETIME.value

    def __repr__(self):
        """String representation of the Plan model."""
        return f"<Plan {self.name} - {self.plan_type} - ${self.monthly_price}>"
