"""
Authentication utilities and decorators.
"""
from functools import wraps

from flask_jwt_extended import get_jwt

from trainerhub.services.errors import Unauthorized
from trainerhub.utils.responses import error_response


def admin_required():
    """
    Decorator to check if the current user has admin privileges.
    Must be used after jwt_required() decorator.

    The token claim is only a first gate; the services re-check the role
    stored in the database.

    Returns:
        function: Decorator function
    """
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            claims = get_jwt()

            if not claims.get('is_admin', False):
                return error_response(Unauthorized())

            return fn(*args, **kwargs)
        return decorator
    return wrapper
