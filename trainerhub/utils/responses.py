"""
Response envelopes shared by the API namespaces.
"""
from functools import wraps

from flask import current_app, request

from trainerhub.services.errors import SubscriptionError, ValidationFailed


def error_response(error):
    """
    Build the ``{"success": false, "error": {...}}`` envelope for a domain error.

    Args:
        error (SubscriptionError): The raised error

    Returns:
        tuple: (body, HTTP status)
    """
    current_app.logger.debug("Returning %s (%s): %s", error.kind, error.http_status, error.message)
    return {'success': False, 'error': error.to_dict()}, error.http_status


def domain_errors(fn):
    """
    Turn ``SubscriptionError`` raised by a resource method into the error envelope.

    Resources using it marshal their own success payloads, since
    ``marshal_with`` would also reshape the error body.
    """
    @wraps(fn)
    def decorator(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SubscriptionError as e:
            return error_response(e)
    return decorator


def parse_bool_arg(value, field):
    """Parse an optional ``true``/``false`` query argument."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    raise ValidationFailed(f"{field} must be true or false", field=field, value=value)


def json_body():
    """Return the request's JSON object, or raise ``ValidationFailed``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be a JSON object")
    return data
