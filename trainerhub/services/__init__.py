"""
Services package: plan catalog, pricing, subscription ledger and assignment.
"""
from .assignment import PlanAssignmentService
from .audit import AuditTrail
from .cancellation import CancellationOutcome, resolve_cancellation
from .catalog import PlanCatalog
from .errors import (Conflict, NoActiveSubscription, PeriodInvalidForPlanType, PlanInactive,
                     PlanInUse, PlanNotFound, SubscriptionError, TrainerNotFound,
                     TypeChangeBlocked, Unauthorized, ValidationFailed)
from .ledger import Subscription, SubscriptionLedger
from .periods import next_due_date
from .pricing import compute_final_price, select_base_price
from .sweeper import sweep_past_due

__all__ = [
    'PlanAssignmentService',
    'AuditTrail',
    'CancellationOutcome',
    'resolve_cancellation',
    'PlanCatalog',
    'Subscription',
    'SubscriptionLedger',
    'next_due_date',
    'compute_final_price',
    'select_base_price',
    'sweep_past_due',
    'SubscriptionError',
    'ValidationFailed',
    'PeriodInvalidForPlanType',
    'PlanInUse',
    'TypeChangeBlocked',
    'Conflict',
    'PlanNotFound',
    'TrainerNotFound',
    'PlanInactive',
    'NoActiveSubscription',
    'Unauthorized',
]
