from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, CorruptStoreError, ValidationError

logger = logging.getLogger(__name__)


def error_response(message: str, status: int, errors: Optional[dict] = None):
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return jsonify(body), status


def current_role() -> Optional[Role]:
    value = session.get("role")
    return Role(value) if value else None


def request_data() -> dict:
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "role" not in session:
            return error_response("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "role" not in session:
                return error_response("Please log in to continue", 401)
            if session.get("role") not in allowed:
                return error_response("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CorruptStoreError)
    def handle_corrupt_store(e: CorruptStoreError):
        logger.error("Stored data is corrupt: %s", e)
        return error_response("Stored attendance data is corrupt", 500)

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return error_response(str(e), 400, e.errors)

    @app.errorhandler(AuthenticationError)
    def handle_authentication(e: AuthenticationError):
        return error_response(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def handle_authorization(e: AuthorizationError):
        return error_response(str(e), 403)
