"""
API error types shared by every service.

Each error carries the HTTP status it maps to. The gateway registers a
single handler that renders them as { "message": ... } JSON.
"""

from typing import Optional, Tuple

from flask import Flask, jsonify, Response


class ApiError(Exception):
    """Base class for errors surfaced directly to the caller."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class BadRequest(ApiError):
    status_code = 400
    message = "Invalid request"


class Unauthenticated(ApiError):
    status_code = 401
    message = "Token not provided"


class InvalidToken(ApiError):
    status_code = 401
    message = "Token authentication failed"


class UnknownUser(ApiError):
    status_code = 401
    message = "User not found"


class InvalidCredentials(ApiError):
    status_code = 401
    message = "Invalid credentials"


class Forbidden(ApiError):
    status_code = 403
    message = "Access not authorized"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


def register_error_handlers(app: Flask) -> None:
    """
    Attach the JSON error handler for ApiError to the Flask app.

    Args:
        app (Flask): The application to configure.
    """

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError) -> Tuple[Response, int]:
        return jsonify({"message": error.message}), error.status_code
