"""
Typed errors raised by the catalog and subscription services.

Every error carries a machine-readable ``kind`` (the class name), a
``category`` that maps to an HTTP status, a log message and a details dict.
The API layer turns them into ``{"success": false, "error": {...}}``.
"""
from trainerhub.utils.json_helpers import convert_decimal_in_dict

VALIDATION = 'validation'
CONFLICT = 'conflict'
NOT_FOUND = 'not_found'
AUTHORIZATION = 'authorization'

CATEGORY_HTTP_STATUS = {
    VALIDATION: 400,
    CONFLICT: 409,
    NOT_FOUND: 404,
    AUTHORIZATION: 403,
}


class SubscriptionError(Exception):
    """Base class for all domain errors."""
    category = VALIDATION
    default_message = "Subscription operation failed"

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def kind(self):
        return type(self).__name__

    @property
    def http_status(self):
        return CATEGORY_HTTP_STATUS[self.category]

    def to_dict(self):
        return {
            'kind': self.kind,
            'category': self.category,
            'message': self.message,
            'details': convert_decimal_in_dict(self.details),
        }


# Validation
class ValidationFailed(SubscriptionError):
    default_message = "Input failed validation"


class PeriodInvalidForPlanType(SubscriptionError):
    default_message = "Billing period is not valid for this plan"


# Conflict
class PlanInUse(SubscriptionError):
    category = CONFLICT
    default_message = "Plan is still assigned to trainers"


class TypeChangeBlocked(SubscriptionError):
    category = CONFLICT
    default_message = "Plan type cannot change while trainers are subscribed"


class Conflict(SubscriptionError):
    category = CONFLICT
    default_message = "Concurrent update detected, re-read and retry"


# Not found
class PlanNotFound(SubscriptionError):
    category = NOT_FOUND
    default_message = "Plan not found"


class TrainerNotFound(SubscriptionError):
    category = NOT_FOUND
    default_message = "Trainer not found"


class PlanInactive(SubscriptionError):
    category = NOT_FOUND
    default_message = "Plan is not active"


class NoActiveSubscription(SubscriptionError):
    category = NOT_FOUND
    default_message = "Trainer has no active subscription"


# Authorization
class Unauthorized(SubscriptionError):
    category = AUTHORIZATION
    default_message = "Administrator privileges required"
