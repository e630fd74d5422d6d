"""
All-or-nothing execution of service operations.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from trainerhub import db

from .errors import Conflict


def commit_atomically(operation, description="write", retries=None):
    """
    Run ``operation`` and commit its changes as one transaction.

    Trainer rows carry an optimistic version counter, so a concurrent write
    to the same trainer makes the flush raise ``StaleDataError``. The whole
    transaction is then rolled back and ``operation`` re-run against fresh
    state, up to ``retries`` attempts (``SUBSCRIPTION_WRITE_RETRIES``).

    Args:
        operation: Zero-argument callable doing the reads and writes
        description (str): Label used in log messages
        retries (int, optional): Attempt limit override

    Returns:
        Whatever ``operation`` returned

    Raises:
        Conflict: When every attempt lost the race, or a constraint failed
            because of a concurrent change
        SubscriptionError: Re-raised unchanged after rolling back
    """
    attempts = retries or current_app.config.get('SUBSCRIPTION_WRITE_RETRIES', 3)

    for attempt in range(1, attempts + 1):
        try:
            result = operation()
            db.session.commit()
            return result
        except StaleDataError as e:
            db.session.rollback()
            current_app.logger.debug(
                "Version conflict on %s (attempt %d/%d): %s", description, attempt, attempts, e
            )
        except IntegrityError as e:
            # A row referenced by this write vanished or was claimed concurrently
            db.session.rollback()
            current_app.logger.warning("Integrity conflict on %s: %s", description, e.orig)
            raise Conflict(f"{description} conflicted with a concurrent change") from e
        except Exception:
            db.session.rollback()
            raise

    current_app.logger.warning("Giving up on %s after %d conflicting attempts", description, attempts)
    raise Conflict(f"{description} kept conflicting with concurrent updates", attempts=attempts)
