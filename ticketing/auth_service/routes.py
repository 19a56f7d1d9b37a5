"""
Authentication service route handlers.

Provides routes for:
- User login (email + password -> bearer token)

Registration lives with the partner and customer services. All JWT
logic is delegated to `auth_service.utils`.
"""

import logging
from typing import Tuple, Dict, Any

import psycopg2
from flask import Blueprint, request, jsonify, Response

from ticketing.database.db_connection import get_db
from ticketing.auth_service.users import (
    get_user_by_email,
    missing_fields,
    non_scalar_fields,
    read_json_body,
)
from ticketing.auth_service.utils import DUMMY_PASSWORD_HASH, create_token, verify_password
from ticketing.errors import BadRequest, InvalidCredentials

auth_bp = Blueprint("auth", __name__)


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """
    Log every incoming request method and path to the authentication service.
    """
    logging.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.

    Args:
        response (Response): The Flask response object.

    Returns:
        Response: The passed-through response object.
    """
    logging.info(f"[Auth] Response {response.status}")
    return response


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: JSON with the token.
        400: Missing credentials.
        401: Invalid credentials (wrong password or email).
        500: Database error.
    """
    data: Dict[str, Any] = read_json_body()

    if missing_fields(data, "email", "password"):
        raise BadRequest("Email and password required")
    if non_scalar_fields(data, "email", "password"):
        raise BadRequest("Email and password must be plain values")

    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                user = get_user_by_email(cur, data["email"])
    except psycopg2.Error as e:
        logging.error(f"[Auth] Database error during login: {e}")
        return jsonify({"message": "Login failed"}), 500

    # Unknown emails still pay for one Argon2 verify
    password_hash = user["password_hash"] if user else DUMMY_PASSWORD_HASH
    password_ok = verify_password(str(data["password"]), password_hash)
    if not user or not password_ok:
        raise InvalidCredentials()

    token = create_token(user["id"], user["email"])

    return jsonify({"token": token}), 200
