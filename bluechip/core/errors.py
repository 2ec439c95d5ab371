"""Error signals and the central failure reporter.

Every failure that should end in an error page travels as an ``ErrorSignal``
(or is converted into one here) and is rendered through ``render_failure``.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, current_app, render_template
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Oh no, something went wrong!"
NOT_FOUND_MESSAGE = "Page Not Found"
DEFAULT_STATUS_CODE = 500


class ErrorSignal(Exception):
    """Typed failure carrying a user-facing message and an HTTP status code."""

    status_code: Optional[int] = DEFAULT_STATUS_CODE

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailure(ErrorSignal):
    """User-correctable input error; message lists every violated rule."""

    status_code = 400


class RouteNotFound(ErrorSignal):
    status_code = 404

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message)


def _status_of(error: BaseException) -> int:
    if isinstance(error, HTTPException):
        status = error.code
    else:
        status = getattr(error, "status_code", None)
    if isinstance(status, int) and 400 <= status <= 599:
        return status
    return DEFAULT_STATUS_CODE


def _message_of(error: BaseException, status: int) -> str:
    if isinstance(error, ErrorSignal):
        return error.message
    if isinstance(error, HTTPException):
        return NOT_FOUND_MESSAGE if status == 404 else (error.description or "")
    if current_app.config.get("EXPOSE_ERROR_DETAILS", False):
        return str(error)
    return ""


def render_failure(error: BaseException):
    """Render the uniform error page for any failure."""
    status = _status_of(error)
    message = _message_of(error, status) or GENERIC_ERROR_MESSAGE
    err = ErrorSignal(message, status)
    return render_template("error.html", err=err), status


def register_error_handlers(app: Flask) -> None:
    """Route every failure to the single error page."""

    @app.errorhandler(ErrorSignal)
    def _signal(exc: ErrorSignal):
        logger.info("Request failed with %s: %s", _status_of(exc), exc.message)
        return render_failure(exc)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return render_failure(exc)

    @app.errorhandler(Exception)
    def _unclassified(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        return render_failure(exc)


__all__ = [
    "ErrorSignal",
    "GENERIC_ERROR_MESSAGE",
    "RouteNotFound",
    "ValidationFailure",
    "register_error_handlers",
    "render_failure",
]
