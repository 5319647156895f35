"""
Custom exception classes for consistent error handling
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class CareerCardException(Exception):
    """Base exception for all career card errors"""
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, error_code: str = None, details: dict = None):
        self.message = message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        return {
            'error': self.message,
            'error_code': self.error_code,
            'details': self.details
        }

    def to_response(self):
        return jsonify(self.to_dict()), self.status_code


class ValidationError(CareerCardException):
    """Input validation error"""
    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str = None, details: dict = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, self.error_code, details)


class AuthenticationError(CareerCardException):
    """Missing, invalid or expired bearer token"""
    status_code = 401
    error_code = "AUTH_ERROR"

    def __init__(self, message: str = "Authentication required", details: dict = None):
        super().__init__(message, self.error_code, details)


class AuthorizationError(CareerCardException):
    """Permission denied error"""
    status_code = 403
    error_code = "AUTHORIZATION_ERROR"

    def __init__(self, message: str = "Permission denied", details: dict = None):
        super().__init__(message, self.error_code, details)


class NotFoundError(CareerCardException):
    """Resource not found error"""
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", details: dict = None):
        super().__init__(f"{resource} not found", self.error_code, details)


class PaymentRequiredError(CareerCardException):
    """The AI gateway has run out of credits"""
    status_code = 402
    error_code = "PAYMENT_REQUIRED"

    def __init__(self, message: str = "AI credits exhausted, please add funds to the AI workspace.", details: dict = None):
        super().__init__(message, self.error_code, details)


class RateLimitError(CareerCardException):
    """Rate limit exceeded error"""
    status_code = 429
    error_code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str = "Rate limits exceeded, please try again later.", retry_after: int = None, details: dict = None):
        error_details = details or {}
        if retry_after:
            error_details['retry_after'] = retry_after
        super().__init__(message, self.error_code, error_details)


class ExternalAPIError(CareerCardException):
    """
    Downstream failure (LLM gateway, portfolio site).

    The client only ever sees a generic message; ``service`` is kept for logs.
    """
    status_code = 500
    error_code = "EXTERNAL_API_ERROR"

    def __init__(self, service: str, message: str = None, details: dict = None):
        self.service = service
        super().__init__(message or GENERIC_ERROR_MESSAGE, self.error_code, details)


class ConfigurationError(CareerCardException):
    """Server is missing a secret or an SDK was never initialised"""
    status_code = 500
    error_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str = "Server configuration error", details: dict = None):
        super().__init__(message, self.error_code, details)


def handle_career_card_exception(e: CareerCardException):
    """Flask error handler for career card exceptions"""
    if e.status_code >= 500:
        logger.error(f"{type(e).__name__}: {e.message}", extra={'service': getattr(e, 'service', None)})
    return e.to_response()


def register_error_handlers(app):
    """Register error handlers with Flask app"""
    app.register_error_handler(CareerCardException, handle_career_card_exception)

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({
            'error': 'Bad request',
            'error_code': 'BAD_REQUEST',
            'details': {'message': getattr(e, 'description', str(e))}
        }), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({
            'error': 'Resource not found',
            'error_code': 'NOT_FOUND',
            'details': {}
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({
            'error': 'Method not allowed',
            'error_code': 'METHOD_NOT_ALLOWED',
            'details': {}
        }), 405

    @app.errorhandler(429)
    def too_many_requests(e):
        return RateLimitError(details={'limit': getattr(e, 'description', '')}).to_response()

    @app.errorhandler(Exception)
    def unexpected_error(e):
        if isinstance(e, HTTPException):
            return e
        logger.error(f"Unhandled error: {e}", exc_info=True)
        return jsonify({
            'error': GENERIC_ERROR_MESSAGE,
            'error_code': 'INTERNAL_ERROR',
            'details': {}
        }), 500
