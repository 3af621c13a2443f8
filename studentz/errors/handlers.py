from flask import request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from ..http import api_error
from .exceptions import AppError, PayloadTooLarge


def register_error_handlers(app):
    """Register app-level error handlers.

    The API routes map the expected failures themselves. This layer turns
    whatever escapes them into the JSON error shape, without internals.
    """

    @app.errorhandler(RequestEntityTooLarge)
    @app.errorhandler(PayloadTooLarge)
    def handle_too_large(e):
        return api_error(413, "Payload too large")

    @app.errorhandler(AppError)
    def handle_app_error(e: AppError):
        if e.status >= 500:
            app.logger.exception("Unhandled application error")
            return api_error(e.status, "Server error")
        return api_error(e.status, e.message)

    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        # Keep Werkzeug default pages outside the API.
        if request.path.startswith("/api"):
            return api_error(e.code or 500, e.name)
        return e

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        app.logger.exception("Unhandled error")
        if request.path.startswith("/api"):
            return api_error(500, "Server error")
        raise e
