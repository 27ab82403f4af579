from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import g, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    DuplicateCheckInError,
    NotFoundError,
    ValidationError,
)
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def error_response(e: DomainError):
    if isinstance(e, DuplicateCheckInError):
        status = 409
    elif isinstance(e, NotFoundError):
        status = 404
    elif isinstance(e, AuthorizationError):
        status = 403
    else:
        status = 400
    return jsonify({"success": False, "error": e.code, "message": str(e)}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def make_guards(users: UserRepository):
    """Build ``login_required``/``roles_required`` bound to a user repository.

    ``session["user_id"]`` is populated by the external sign-in flow; the user is
    re-read per request so deactivation and role changes apply immediately.
    Domain errors raised by the view become structured JSON responses.
    """

    def login_required(view: Callable):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user_id = session.get("user_id")
            user = users.get_by_id(int(user_id)) if user_id is not None else None
            if not user or not user.is_active:
                return jsonify({"success": False, "error": "AuthenticationRequired", "message": "Authentication required"}), 401
            g.current_user = user
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(e)
            except Exception:
                logger.exception("Unhandled error in %s", request.path)
                return jsonify({"success": False, "error": "InternalError", "message": "Internal server error"}), 500

        return wrapper

    def roles_required(*roles: Role):
        def decorator(view: Callable):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if g.current_user.role not in roles:
                    return error_response(AuthorizationError("You don't have permission for this action"))
                return view(*args, **kwargs)

            return login_required(wrapper)

        return decorator

    return login_required, roles_required
