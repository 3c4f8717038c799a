import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from ...extensions import db
from ...errors import AppError, AnnotationUnavailable
from . import errors_bp

log = logging.getLogger(__name__)


def _json_error(message: str, code: int):
    return jsonify({"message": message}), code


# Domain errors carry their own status
@errors_bp.app_errorhandler(AppError)
def err_app(e: AppError):
    if isinstance(e, AnnotationUnavailable):
        # upstream detail goes to the log, never to the client
        log.error("Annotation unavailable on %s %s: %s", request.method, request.path, e)
    if e.status_code >= 500:
        db.session.rollback()
    return _json_error(e.message, e.status_code)


# 404 – Not Found (unknown route or non-integer id)
@errors_bp.app_errorhandler(404)
def err_404(e):
    return _json_error("Not found", 404)


# 405 – Method Not Allowed
@errors_bp.app_errorhandler(405)
def err_405(e):
    return _json_error("Method not allowed", 405)


# Fallback for uncaught HTTPException (malformed JSON body, payload too large...)
@errors_bp.app_errorhandler(HTTPException)
def err_http(e: HTTPException):
    return _json_error(e.description or e.name, e.code or 500)


# Last-resort: any other Exception
@errors_bp.app_errorhandler(Exception)
def err_unexpected(e):
    # if a DB action caused this, rollback so the session isn't stuck in a bad transaction
    db.session.rollback()
    log.exception("Unhandled error on %s %s", request.method, request.path)
    # generic 500, internals stay in the log
    return _json_error("Internal server error", 500)
