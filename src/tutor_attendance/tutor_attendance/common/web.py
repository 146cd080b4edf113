from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.exceptions import ApiError, AuthenticationError, DomainError, TransientApiError, ValidationError


def login_required(view):
    """JSON 401 when no tutor is logged in. Wraps async views only."""

    @wraps(view)
    async def wrapper(*args, **kwargs):
        if not session.get("token"):
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return await view(*args, **kwargs)

    return wrapper


def json_error(error: DomainError):
    if isinstance(error, ValidationError):
        status = 400
    elif isinstance(error, AuthenticationError):
        status = 401
    elif isinstance(error, TransientApiError):
        status = 503
    elif isinstance(error, ApiError):
        status = error.status if error.status and 400 <= error.status < 500 else 502
    else:
        status = 400
    return jsonify({"success": False, "message": str(error)}), status
