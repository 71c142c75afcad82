"""
JSON error handlers

Maps exceptions raised while handling API requests to the error envelope:
{timestamp, status, error, message, details?, path?}
"""

import logging
from datetime import datetime, timezone

from flask import jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from services.exceptions import TranslationError

logger = logging.getLogger(__name__)


def error_response(status: int, error: str, message: str, details=None):
    body = {
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'status': status,
        'error': error,
        'message': message,
        'path': request.path
    }
    if details is not None:
        body['details'] = details
    return jsonify(body), status


def format_validation_errors(exc: ValidationError):
    """Turn pydantic errors into "field.path: message" strings"""
    messages = []
    for err in exc.errors():
        location = '.'.join(str(part) for part in err['loc'])
        messages.append(f"{location}: {err['msg']}" if location else err['msg'])
    return messages


def register_error_handlers(app):
    """Register JSON error handlers on the Flask app"""

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        logger.warning(f"Validation error on {request.path}: {e.error_count()} errors")
        return error_response(400, 'Validation Failed', 'Request validation failed',
                              details=format_validation_errors(e))

    @app.errorhandler(ValueError)
    def handle_value_error(e):
        logger.warning(f"Invalid argument on {request.path}: {e}")
        return error_response(400, 'Invalid Argument', str(e))

    @app.errorhandler(TranslationError)
    def handle_translation_error(e):
        logger.error(f"Translation error occurred: {e}", exc_info=e)
        return error_response(500, 'Translation Error', str(e))

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return error_response(e.code, e.name, e.description)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.error(f"Unexpected error occurred: {e}", exc_info=e)
        return error_response(500, 'Internal Server Error', 'An unexpected error occurred')
