"""
User row helpers shared by the registration and login routes.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from flask import request

from ticketing.auth_service.utils import hash_password
from ticketing.errors import BadRequest


def normalize_email(email: Optional[str]) -> str:
    return str(email or "").strip().lower()


def get_user_by_email(cur: Any, email: str) -> Optional[Any]:
    cur.execute(
        "SELECT id, name, email, password_hash FROM users WHERE email = %s;",
        (normalize_email(email),),
    )
    return cur.fetchone()


def insert_user(cur: Any, *, name: str, email: str, password: str, created_at: datetime) -> int:
    """
    Insert a user row on an open cursor and return its id.

    The caller owns the transaction; nothing is committed here.
    """
    cur.execute(
        """
        INSERT INTO users (name, email, password_hash, created_at)
        VALUES (%s, %s, %s, %s)
        RETURNING id;
        """,
        (name, normalize_email(email), hash_password(str(password)), created_at),
    )
    return cur.fetchone()["id"]


def read_json_body() -> Dict[str, Any]:
    """
    Parse the request body as a JSON object.

    A missing or unparsable body gives an empty dict, so the required-field
    checks report what is absent.

    Raises:
        BadRequest: The body is valid JSON but not an object.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def missing_fields(data: Dict[str, Any], *fields: str) -> list:
    """Names of required fields that are absent or blank in a JSON body."""
    return [f for f in fields if data.get(f) in (None, "")]


def non_scalar_fields(data: Dict[str, Any], *fields: str) -> list:
    """Names of fields holding a JSON object or array instead of a plain value."""
    return [f for f in fields if isinstance(data.get(f), (dict, list))]


def require_fields(data: Dict[str, Any], *fields: str, optional: tuple = ()) -> None:
    """
    Reject a body with blank required fields or nested values.

    Raises:
        BadRequest: Naming the offending fields.
    """
    missing = missing_fields(data, *fields)
    if missing:
        raise BadRequest(f"Missing required fields: {', '.join(missing)}")

    nested = non_scalar_fields(data, *fields, *optional)
    if nested:
        raise BadRequest(f"Fields must be plain values: {', '.join(nested)}")
