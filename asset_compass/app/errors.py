# app/errors.py
"""
Application exceptions and the Flask handlers that render them.
API paths and JSON requests get JSON bodies; screens get error.html.
"""

import logging
from typing import Optional

from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for application errors."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}

    def to_dict(self):
        rv = dict(self.payload)
        rv['error'] = self.message
        rv['status'] = self.status_code
        return rv


class ValidationError(AppError):
    """Raised when input validation fails."""
    status_code = 400


class AuthorizationError(AppError):
    """Raised when the current user may not perform an action."""
    status_code = 403


class NotFoundError(AppError):
    """Raised when a record does not exist."""
    status_code = 404


class ConflictError(AppError):
    """Raised when an operation conflicts with the current state of a record."""
    status_code = 409


def _wants_json():
    return request.is_json or request.path.startswith('/api/')


def register_error_handlers(app: Flask):
    """Register all error handlers with the Flask app."""

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        logger.warning("Application error: %s", error.message, extra={'status': error.status_code})
        if _wants_json():
            return jsonify(error.to_dict()), error.status_code
        return render_template('error.html', error_code=error.status_code,
                               error_message=error.message), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        if error.code >= 500:
            logger.error("HTTP %s: %s", error.code, error.description)
        else:
            logger.info("HTTP %s on %s", error.code, request.path)
        if _wants_json():
            return jsonify({'error': error.description, 'status': error.code}), error.code
        return render_template('error.html', error_code=error.code,
                               error_message=error.description), error.code


def log_data_error(operation: str, error: Exception, context: Optional[dict] = None):
    """
    Log store errors with context.

    Args:
        operation: Operation being performed (e.g., "delete_location")
        error: The exception that occurred
        context: Additional context (e.g., location_id)
    """
    logger.error(
        "Data error during %s: %s: %s", operation, type(error).__name__, error,
        exc_info=True,
        extra={'operation': operation, 'context': context or {}}
    )


def get_safe_error_message(error: Exception, default: str = "An error occurred") -> str:
    """Message that can be shown to a user without leaking store details."""
    if isinstance(error, AppError):
        return error.message

    friendly_messages = {
        'IntegrityError': 'This record already exists or is still linked to other records',
        'OperationalError': 'Database operation failed. Please try again',
    }
    return friendly_messages.get(type(error).__name__, default)
