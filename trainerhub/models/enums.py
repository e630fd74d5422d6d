"""
Enumerations shared by the plan catalog, the subscription ledger and the API.

Columns store the ``.value`` strings; services convert back with ``Enum(value)``.
"""
from enum import Enum


class PlanType(Enum):
    """Enum for plan types."""
    PUBLIC = "public"
    LIFETIME = "lifetime"


class BillingPeriod(Enum):
    """Enum for billing cadence of a subscription."""
    MONTHLY = "monthly"
    ANNUAL = "annual"
    LIFETIME = "lifetime"
    NONE = "none"


class SubscriptionStatus(Enum):
    """Enum for subscription status values."""
    PENDING = "pending"
    TRIAL = "trial"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    LIFETIME = "lifetime"


class UserRole(Enum):
    """Enum for account roles."""
    ADMIN = "admin"
    TRAINER = "trainer"


class AuditAction(Enum):
    """Enum for audited mutations."""
    ASSIGN = "assign"
    CANCEL = "cancel"
    PAST_DUE = "past_due"
    PLAN_CREATE = "plan_create"
    PLAN_UPDATE = "plan_update"
    PLAN_DELETE = "plan_delete"
    PLAN_TOGGLE = "plan_toggle"
    PLAN_DUPLICATE = "plan_duplicate"
    PLAN_REORDER = "plan_reorder"
