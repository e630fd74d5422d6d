"""
Cancellation policy: how a cancellation changes status and due date.

| current status          | immediate | result   | due date  |
|-------------------------|-----------|----------|-----------|
| active / trial / past_due | True    | canceled | today     |
| active / trial / past_due | False   | canceled | unchanged |
| lifetime                | any       | canceled | today     |
| canceled / pending      | any       | NoActiveSubscription    |
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from trainerhub.models.enums import SubscriptionStatus

from .errors import NoActiveSubscription

RECURRING_STATUSES = frozenset({
    SubscriptionStatus.ACTIVE,
    SubscriptionStatus.TRIAL,
    SubscriptionStatus.PAST_DUE,
})


@dataclass(frozen=True)
class CancellationOutcome:
    status: SubscriptionStatus
    due_date: Optional[date]


def resolve_cancellation(status, due_date, immediate, today):
    """
    Decide the state a subscription moves to when it is canceled.

    Args:
        status (SubscriptionStatus): Current status
        due_date (date or None): Current due date
        immediate (bool): Cancel now instead of at the end of the period
        today (date): Date of the cancellation

    Returns:
        CancellationOutcome: Resulting status and due date

    Raises:
        NoActiveSubscription: When there is nothing to cancel
    """
    if status is SubscriptionStatus.LIFETIME:
        # Lifetime plans have no period end to run out
        return CancellationOutcome(SubscriptionStatus.CANCELED, today)
    if status in RECURRING_STATUSES:
        return CancellationOutcome(SubscriptionStatus.CANCELED, today if immediate else due_date)
    raise NoActiveSubscription(status=status.value)
