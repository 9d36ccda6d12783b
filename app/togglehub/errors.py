"""
API error taxonomy and the JSON error boundary.

Every failure leaving a handler is rendered as
``{"error": <HTTP status phrase>, "message": <code>}``. The internal cause is
logged and never sent to the client.
"""

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

BAD_REQUEST_ERROR = "bad_request"
UNAUTHORIZED_ERROR = "unauthorized"
FORBIDDEN_ERROR = "forbidden"
NOT_FOUND_ERROR = "not_found"
EMAIL_CONFLICT_ERROR = "email_conflict"
INTERNAL_SERVER_ERROR = "internal_server_error"

_CODES_BY_STATUS = {
    400: BAD_REQUEST_ERROR,
    401: UNAUTHORIZED_ERROR,
    403: FORBIDDEN_ERROR,
    404: NOT_FOUND_ERROR,
    409: EMAIL_CONFLICT_ERROR,
}


class ApiError(Exception):
    status_code: int = 500
    message: str = INTERNAL_SERVER_ERROR

    def __init__(self, cause: str | None = None) -> None:
        super().__init__(cause or self.message)
        self.cause = cause


class ClientInputError(ApiError):
    status_code = 400
    message = BAD_REQUEST_ERROR


class AuthenticationError(ApiError):
    status_code = 401
    message = UNAUTHORIZED_ERROR


class AuthorizationError(ApiError):
    status_code = 403
    message = FORBIDDEN_ERROR


class NotFoundError(ApiError):
    status_code = 404
    message = NOT_FOUND_ERROR


class ConflictError(ApiError):
    status_code = 409
    message = EMAIL_CONFLICT_ERROR


class InternalError(ApiError):
    status_code = 500
    message = INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str):
    body = {"error": HTTPStatus(status_code).phrase, "message": message}
    return jsonify(body), status_code


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):
        if e.status_code >= 500:
            current_app.logger.debug("Server error: cause=%s", e.cause)
        else:
            current_app.logger.debug("Client error: cause=%s", e.cause)
        return error_response(e.status_code, e.message)

    @app.errorhandler(SQLAlchemyError)
    def _storage_error(e: SQLAlchemyError):
        current_app.logger.debug("Server error: cause=%s", e)
        return error_response(500, INTERNAL_SERVER_ERROR)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        code = e.code or 500
        # unknown routes, wrong methods, oversized bodies
        message = _CODES_BY_STATUS.get(code, BAD_REQUEST_ERROR if code < 500 else INTERNAL_SERVER_ERROR)
        current_app.logger.debug("Client error: cause=%s", e.description)
        return error_response(code, message)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        current_app.logger.exception("Unhandled error: %s", e)
        return error_response(500, INTERNAL_SERVER_ERROR)
