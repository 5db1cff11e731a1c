from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import logging

from utils.session import InvalidCredentials, InvalidRefreshToken, SessionPersistenceError

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized"


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def unauthorized():
    # One body for every authentication failure; the reason is only logged.
    return error_response("UNAUTHORIZED", UNAUTHORIZED_MESSAGE, 401)


def register_error_handlers(app):
    # 400 Bad Request (generic)
    @app.errorhandler(400)
    def bad_request(e):
        message = getattr(e, "description", "Bad request")
        return error_response("BAD_REQUEST", message, 400)

    # 401 Unauthorized: never echo a reason to the client
    @app.errorhandler(401)
    def handle_unauthorized(e):
        return unauthorized()

    @app.errorhandler(InvalidCredentials)
    def handle_invalid_credentials(err: InvalidCredentials):
        return unauthorized()

    @app.errorhandler(InvalidRefreshToken)
    def handle_invalid_refresh(err: InvalidRefreshToken):
        return unauthorized()

    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        message = getattr(e, "description", None) or "Resource not found"
        return error_response("NOT_FOUND", message, 404)

    # 413 Upload too large (MAX_CONTENT_LENGTH)
    @app.errorhandler(413)
    def too_large(e):
        return error_response("PAYLOAD_TOO_LARGE", "Upload exceeds the size limit", 413)

    # Marshmallow validation errors map to 400 with field details
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("BAD_REQUEST", "Invalid input", 400, details=err.messages)

    @app.errorhandler(SessionPersistenceError)
    def handle_persistence_error(err: SessionPersistenceError):
        logger.error("session could not be persisted")
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response("HTTP_ERROR", err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
