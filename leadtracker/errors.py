"""
Error taxonomy for the lead API and the Flask handlers that render it.

Every error a route can surface derives from LeadTrackerError and carries the
HTTP status it maps to. Raw store error text never reaches the client.
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger('leadtracker.errors')


class LeadTrackerError(Exception):
    """Base class — message is safe to show to the caller."""
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class ValidationError(LeadTrackerError):
    """Malformed input, caught before the store is touched."""
    status_code = 400
    default_message = 'Validation errors'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_dict(self):
        body = super().to_dict()
        if self.errors:
            body['errors'] = self.errors
        return body


class NothingToUpdateError(ValidationError):
    """A patch that contributes no updatable field."""
    default_message = 'No valid fields to update'


class NotFoundError(LeadTrackerError):
    """Absent id and foreign-owned id are the same outcome."""
    status_code = 404
    default_message = 'Lead not found'


class ConflictError(LeadTrackerError):
    status_code = 409
    default_message = 'Lead with this email already exists'


class AuthenticationError(LeadTrackerError):
    status_code = 401
    default_message = 'Not authenticated'


class InternalError(LeadTrackerError):
    status_code = 500
    default_message = 'Internal server error'


def register_error_handlers(app):
    """Render LeadTrackerError subclasses (and stray exceptions) as JSON."""

    @app.errorhandler(LeadTrackerError)
    def handle_lead_tracker_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({'error': err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        logger.error("Unhandled error: %s", err, exc_info=True)
        return jsonify(InternalError().to_dict()), 500
