from __future__ import annotations

import logging
from functools import wraps

from flask import g, jsonify, request

from ..auth.service import AuthService
from ..core.exceptions import (
    DomainError,
    DuplicateKeyError,
    FormatError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (UnauthorizedError, 401),
    (NotFoundError, 404),
    (DuplicateKeyError, 409),
    (FormatError, 400),
    (ValidationError, 400),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def error_response(error: DomainError):
    return jsonify({"message": str(error)}), status_for(error)


def server_error(action: str):
    logger.exception("Unexpected error while %s", action)
    return jsonify({"message": f"Server error while {action}"}), 500


def make_admin_required(auth_service: AuthService):
    """Decorator factory: the view runs only with a valid ``Authorization: Bearer`` token."""

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.admin_id = auth_service.authorize_header(request.headers.get("Authorization"))
            except UnauthorizedError as e:
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    return admin_required


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
