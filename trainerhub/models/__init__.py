"""
Models package for SQLAlchemy database models.
"""
from .base import BaseModel
from .enums import AuditAction, BillingPeriod, PlanType, SubscriptionStatus, UserRole
from .plan import Plan
from .user import User
from .subscription_history import HistoryImmutableError, SubscriptionHistoryEntry
from .audit_entry import AuditEntry

__all__ = [
    'BaseModel',
    'AuditAction',
    'BillingPeriod',
    'PlanType',
    'SubscriptionStatus',
    'UserRole',
    'Plan',
    'User',
    'SubscriptionHistoryEntry',
    'HistoryImmutableError',
    'AuditEntry',
]
