from flask import jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException


class AppError(Exception):
    status_code = 400
    code = "app_error"

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        payload = {"success": False, "error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidInput(AppError):
    status_code = 400
    code = "invalid_input"


class OutOfRange(InvalidInput):
    code = "out_of_range"


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class SignatureMismatch(AppError):
    status_code = 400
    code = "signature_mismatch"


class UpstreamError(AppError):
    status_code = 500
    code = "upstream_error"


class PersistenceError(AppError):
    status_code = 500
    code = "persistence_error"


class BookingConflict(PersistenceError):
    status_code = 409
    code = "booking_conflict"


class FeatureDisabled(AppError):
    status_code = 503
    code = "feature_disabled"


RATE_LIMITED_MESSAGE = "Too many payment attempts. Please try again later."


def _error(message, status_code, details=None):
    payload = {"success": False, "error": message}
    if details is not None:
        payload["details"] = details
    return jsonify(payload), status_code


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err):
        if isinstance(err, SignatureMismatch):
            app.logger.warning("Payment signature rejected: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(_err):
        app.logger.warning("Database integrity error")
        return _error("Conflict. Resource already exists.", 409)

    @app.errorhandler(400)
    def bad_request(_err):
        return _error("Bad request", 400)

    @app.errorhandler(404)
    def not_found(_err):
        return _error("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_err):
        return _error("Method not allowed", 405)

    @app.errorhandler(429)
    def rate_limited(err):
        app.logger.warning("Rate limit hit on %s: %s", request.path, err.description)
        if request.path.startswith("/api/payments/"):
            from getaway.models.enums import AuditEvent
            from getaway.routes.api.common import audit_log, client_ip, user_agent

            audit_log().record(
                AuditEvent.RATE_LIMIT_HIT,
                ip_address=client_ip(),
                user_agent=user_agent(),
                error_message=str(err.description),
            )
            return _error(RATE_LIMITED_MESSAGE, 429)
        return _error("Too many requests", 429)

    @app.errorhandler(500)
    def server_error(_err):
        app.logger.exception("Internal server error")
        return _error("Internal server error", 500)

    @app.errorhandler(Exception)
    def unhandled_error(err):
        if isinstance(err, HTTPException):
            return _error(err.description or err.name, err.code or 500)
        app.logger.exception("Unhandled error on %s", request.path)
        details = None
        if isinstance(err, SQLAlchemyError):
            from getaway.services.order_service import db_error_details

            details = db_error_details(err) or None
        return _error("Internal server error", UpstreamError.status_code, details=details)
