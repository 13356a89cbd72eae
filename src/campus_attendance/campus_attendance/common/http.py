from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import DenyReason, Role
from ..core.exceptions import (
    AlreadyRecordedError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotConfiguredError,
    NotFoundError,
    UnavailableError,
    ValidationError,
    WriteConflictError,
)

logger = logging.getLogger(__name__)

DEVICE_HEADER = "X-Device-Id"

# First match wins, subclasses before their bases.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (AlreadyRecordedError, 409),
    (WriteConflictError, 409),
    (NotConfiguredError, 409),
    (UnavailableError, 503),
)


def status_for(error: DomainError) -> int:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return status
    return 400


def ok(payload: Optional[dict] = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    body.update(payload or {})
    return jsonify(body), status


def error_response(error: DomainError):
    body: dict[str, Any] = {"success": False, "message": str(error)}
    if error.reason is not None:
        body["reason"] = error.reason.value
    if error.reason is DenyReason.UNAUTHORIZED_DEVICE:
        # A rejected device never keeps a session.
        session.clear()
    return jsonify(body), status_for(error)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        if isinstance(e, UnavailableError):
            logger.warning("%s %s: %s", request.method, request.path, e)
        return error_response(e)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = f"Internal error: {e}" if app.config.get("DEBUG") else "Internal error"
        return jsonify({"success": False, "message": message}), 500


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def current_role() -> Role:
    return Role(session["role"])


class Guards:
    """Route decorators over the session cookie and the caller's device id."""

    def __init__(self, container):
        self._container = container

    def device_id(self) -> Optional[str]:
        """Device id sent by the client, or None when the header is missing."""
        value = (request.headers.get(DEVICE_HEADER) or "").strip()
        return value or None

    def login_required(self, view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "principal_id" not in session:
                raise AuthenticationError("Please sign in to continue")
            # Student device binding is re-checked on every request.
            g.principal = self._container.auth_service.current(session["principal_id"], device_id=self.device_id())
            return view(*args, **kwargs)

        return wrapper

    def roles_required(self, *roles: Role) -> Callable[[Callable], Callable]:
        def decorator(view: Callable) -> Callable:
            @wraps(view)
            def wrapper(*args, **kwargs):
                if g.principal.role not in roles:
                    raise AuthorizationError("You do not have permission")
                return view(*args, **kwargs)

            return self.login_required(wrapper)

        return decorator
