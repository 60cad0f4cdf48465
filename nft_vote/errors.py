from flask import current_app, jsonify, g, request
from werkzeug.exceptions import HTTPException

from .exceptions import VotingAppError


def error_payload(code: str, message: str, details=None, status=400):
    return (
        jsonify({
            "success": False,
            "error": message,
            "code": code,
            "details": details or None,
            "request_id": getattr(g, "request_id", None),
        }),
        status,
    )


def register_error_handlers(app):
    @app.errorhandler(VotingAppError)
    def handle_domain_error(e: VotingAppError):
        return error_payload(e.code, e.message, details=e.details, status=e.status_code)

    # Generic HTTP errors (404, 403, 401, etc.)
    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        desc = e.description

        # Structured error info passed via abort(description=dict)
        if isinstance(desc, dict):
            code = desc.get("code") or e.name.replace(" ", "_").upper()
            message = desc.get("message") or e.name
            details = desc.get("errors") or desc.get("details")
            return error_payload(code=code, message=message, details=details, status=e.code or 400)

        return error_payload(
            code=e.name.replace(" ", "_").upper(),
            message=desc or e.name,
            details=None,
            status=e.code or 400
        )

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Don't leak internals
        current_app.logger.exception(
            "Unhandled exception request_id=%s path=%s", getattr(g, "request_id", None), request.path
        )
        return error_payload("INTERNAL_SERVER_ERROR", "An unexpected error occurred", status=500)
