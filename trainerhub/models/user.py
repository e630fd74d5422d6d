"""
User model for administrators and trainers.

A trainer row also carries the denormalized projection of the trainer's
current subscription, so lookups never need to scan the history table.
"""
from sqlalchemy import Index
from sqlalchemy.ext.hybrid import hybrid_property

from trainerhub import db

from .base import BaseModel
from .enums import BillingPeriod, SubscriptionStatus, UserRole


class User(BaseModel):
    """
    User model for platform accounts.

    Attributes:
        name (str): Display name
        email (str): Unique email address
        role (str): "admin" or "trainer"
        plan_id (int): Current plan of a trainer, if any
        period (str): Billing period of the current subscription
        discount_percent (Decimal): Discount applied to the current plan
        subscription_start (date): Start of the current subscription period
        due_date (date): End of the current period, None for lifetime/no plan
        subscription_status (str): Current subscription status
        cancellation_reason (str): Reason recorded on the last cancellation
        version_id (int): Optimistic lock counter for subscription writes
    """
    __tablename__ = 'users'

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False, default=UserRole.TRAINER.value)

    plan_id = db.Column(db.Integer, db.ForeignKey('plans.id'), nullable=True)
    period = db.Column(db.String(20), nullable=False, default=BillingPeriod.NONE.value)
    discount_percent = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    subscription_start = db.Column(db.Date, nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    subscription_status = db.Column(db.String(20), nullable=False,
                                    default=SubscriptionStatus.PENDING.value)
    cancellation_reason = db.Column(db.String(255), nullable=True)
    version_id = db.Column(db.Integer, nullable=False)

    plan = db.relationship('Plan', back_populates='trainers')

    __mapper_args__ = {'version_id_col': version_id}

    __table_args__ = (
        Index('idx_user_role', 'role'),
        Index('idx_user_plan', 'plan_id'),
        # Past-due sweep and expiring-subscriptions lookups
        Index('idx_user_status_due_date', 'subscription_status', 'due_date'),
    )

    def __init__(self, name, email, role=UserRole.TRAINER.value):
        """
        Initialize a new User instance without a subscription.

        Args:
            name (str): User's display name
            email (str): User's email
            role (str, optional): "admin" or "trainer"
        """
        self.name = name
        self.email = email
        self.role = role
        self.period = BillingPeriod.NONE.value
        self.discount_percent = 0
        self.subscription_status = SubscriptionStatus.PENDING.value

    @hybrid_property
    def is_admin(self):
        """Whether the account has administrator capability."""
        return self.role == UserRole.ADMIN.value

    @hybrid_property
    def is_trainer(self):
        return self.role == UserRole.TRAINER.value

    def __repr__(self):
        """String representation of the User model."""
        return f"<User {self.email} ({self.role}) Status:{self.subscription_status}>"
