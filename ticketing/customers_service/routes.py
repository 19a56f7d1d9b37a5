"""
Customers service route handlers.
Handles public customer registration.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

import psycopg2
import psycopg2.errors
from flask import Blueprint, request, jsonify, Response

from ticketing.auth_service.users import insert_user, read_json_body, require_fields
from ticketing.database.db_connection import get_db

customers_bp = Blueprint("customers", __name__)


@customers_bp.before_request
def before_request() -> None:
    logging.info(f"[Customers] Incoming {request.method} {request.path}")


@customers_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Customers] Response {response.status}")
    return response


@customers_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new customer: a user row plus its customer profile,
    written in one transaction.

    Returns:
        201: {id, name, userId, address, phone, createdAt}
        400: Missing fields or email already registered.
        500: Database error.
    """
    data: Dict[str, Any] = read_json_body()

    require_fields(data, "name", "email", "password", "address", "phone")

    created_at = datetime.now(timezone.utc)

    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                user_id = insert_user(
                    cur,
                    name=data["name"],
                    email=data["email"],
                    password=data["password"],
                    created_at=created_at,
                )
                cur.execute(
                    """
                    INSERT INTO customers (user_id, address, phone, created_at)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id;
                    """,
                    (user_id, data["address"], data["phone"], created_at),
                )
                customer = cur.fetchone()
            conn.commit()
    except psycopg2.errors.UniqueViolation:
        return jsonify({"message": "Email already registered"}), 400
    except psycopg2.Error as e:
        logging.error(f"[Customers] Database error registering customer: {e}")
        return jsonify({"message": "Registration failed"}), 500

    logging.info(f"[Customers] Registered customer {customer['id']} for user {user_id}")

    return jsonify({
        "id": customer["id"],
        "name": data["name"],
        "userId": user_id,
        "address": data["address"],
        "phone": data["phone"],
        "createdAt": created_at.isoformat(),
    }), 201
