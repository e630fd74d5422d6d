"""
Administrator capability check for service calls.
"""
from trainerhub import db
from trainerhub.models import User

from .errors import Unauthorized


def require_admin(actor_id):
    """
    Resolve the acting administrator or raise ``Unauthorized``.

    The check runs before any target lookup so a refused caller learns
    nothing about the entities it named.

    Args:
        actor_id: User id of the caller (int or the string JWT identity)

    Returns:
        User: The administrator
    """
    try:
        actor_pk = int(actor_id)
    except (TypeError, ValueError):
        raise Unauthorized()
    actor = db.session.get(User, actor_pk)
    if actor is None or not actor.is_admin:
        raise Unauthorized()
    return actor
