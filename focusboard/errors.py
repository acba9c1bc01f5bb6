import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException, InternalServerError


logger = logging.getLogger(__name__)


class DuplicateRecordError(Exception):
    """A write collided with a unique constraint."""


def error_envelope(status_code, status_message, message):
    return {
        "statusCode": status_code,
        "statusMessage": status_message,
        "message": message,
    }


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if exc.code >= 500:
            logger.error(
                "request failed",
                extra={"path": request.path, "status": exc.code, "reason": exc.description},
            )
        else:
            logger.warning(
                "request rejected",
                extra={"path": request.path, "status": exc.code, "reason": exc.description},
            )
        response = jsonify(error_envelope(exc.code, exc.name, exc.description))
        response.status_code = exc.code
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        logger.exception("unhandled error", extra={"path": request.path})
        fallback = InternalServerError()
        response = jsonify(
            error_envelope(fallback.code, fallback.name, str(exc) or fallback.description)
        )
        response.status_code = fallback.code
        return response
