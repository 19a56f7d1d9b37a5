"""
Authentication middleware for the whole gateway.

Every request goes through `authenticate_request()` before its handler
runs, except the routes in UNPROTECTED_ROUTES. Protected requests must
carry `Authorization: Bearer <token>`. The token is verified and the
user row it names is looked up again on each request, so tokens of
deleted accounts stop working immediately.

Handlers receive the caller through `identity_required`, which passes
an `Identity` as the first argument instead of reading shared state.
"""

import logging
from functools import wraps
from typing import Any, Callable, List, NamedTuple, Optional, Tuple

import psycopg2
from flask import Flask, Response, g, jsonify, request

from ticketing.auth_service.utils import decode_token
from ticketing.database.db_connection import get_db
from ticketing.errors import ApiError, Unauthenticated, UnknownUser


class Identity(NamedTuple):
    id: int
    email: str


# (method, path prefix) pairs that skip authentication
UNPROTECTED_ROUTES: List[Tuple[str, str]] = [
    ("POST", "/auth/login"),
    ("POST", "/partners/register"),
    ("POST", "/customers/register"),
    ("GET", "/events"),
]


def is_unprotected(method: str, path: str) -> bool:
    """
    Check a request against the allow-list.

    Paths match by prefix, so GET /events/42 is covered by the GET /events entry.
    """
    return any(
        method == route_method and path.startswith(route_path)
        for route_method, route_path in UNPROTECTED_ROUTES
    )


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Return the second whitespace-separated segment of an Authorization header."""
    parts = (header or "").split()
    if len(parts) < 2:
        return None
    return parts[1]


def find_user_by_id(user_id: Any) -> Optional[Any]:
    sql = "SELECT id, email FROM users WHERE id = %s;"
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (user_id,))
            return cur.fetchone()


def authenticate_request() -> Optional[Identity]:
    """
    Resolve the caller of the current request.

    Returns:
        Identity | None: None for allow-listed requests, otherwise the
        authenticated user.

    Raises:
        Unauthenticated: No bearer token supplied.
        InvalidToken: Token failed signature/expiry verification.
        UnknownUser: Token is valid but its user no longer exists.
    """
    if request.method == "OPTIONS" or is_unprotected(request.method, request.path):
        return None

    token = extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        raise Unauthenticated()

    payload = decode_token(token)

    user = find_user_by_id(payload["id"])
    if not user:
        raise UnknownUser()

    return Identity(id=user["id"], email=user["email"])


def _before_request() -> Optional[Tuple[Response, int]]:
    try:
        identity = authenticate_request()
    except ApiError as e:
        logging.info(f"[Auth] Rejected {request.method} {request.path}: {e.message}")
        raise
    except psycopg2.Error as e:
        logging.error(f"[Auth] User lookup failed for {request.method} {request.path}: {e}")
        return jsonify({"message": "Authentication failed"}), 500

    if identity is not None:
        g.identity = identity
    return None


def init_auth(app: Flask) -> None:
    """Install the authentication hook on the application."""
    app.before_request(_before_request)


def identity_required(view: Callable) -> Callable:
    """
    Decorator passing the authenticated Identity as the view's first argument.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = g.get("identity")
        if identity is None:
            raise Unauthenticated()
        return view(identity, *args, **kwargs)

    return wrapper
