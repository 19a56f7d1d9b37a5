"""
Partners service route handlers.

Provides routes for:
- Partner registration (public)
- Creating an event (partner only)
- Listing the caller's events (partner only)
- Reading one of the caller's events (partner only)

Partner-only routes resolve the caller's partner profile from the
authenticated Identity; users without one get 403.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

import psycopg2
import psycopg2.errors
from flask import Blueprint, request, jsonify, Response

from ticketing.auth_service.middleware import Identity, identity_required
from ticketing.auth_service.users import insert_user, read_json_body, require_fields
from ticketing.database.db_connection import get_db
from ticketing.errors import BadRequest, Forbidden, NotFound
from ticketing.events_service.routes import EVENT_COLUMNS, parse_dt, serialize_event

partners_bp = Blueprint("partners", __name__)


def get_partner_for_user(cur: Any, user_id: int) -> Any:
    """
    Fetch the partner profile owned by a user.

    Raises:
        Forbidden: The user has no partner profile.
    """
    cur.execute("SELECT id, user_id, company_name FROM partners WHERE user_id = %s;", (user_id,))
    partner = cur.fetchone()
    if not partner:
        raise Forbidden()
    return partner


@partners_bp.before_request
def before_request() -> None:
    logging.info(f"[Partners] Incoming {request.method} {request.path}")


@partners_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Partners] Response {response.status}")
    return response


# --- REGISTER ---
@partners_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new partner: a user row plus its partner profile.

    Expects a JSON body with:
    - name (str)
    - email (str): Unique email address.
    - password (str)
    - company_name (str)

    Both rows are written in one transaction.

    Returns:
        201: {id, name, userId, company_name, createdAt}
        400: Missing fields or email already registered.
        500: Database error.
    """
    data: Dict[str, Any] = read_json_body()

    require_fields(data, "name", "email", "password", "company_name")

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
                    INSERT INTO partners (user_id, company_name, created_at)
                    VALUES (%s, %s, %s)
                    RETURNING id;
                    """,
                    (user_id, data["company_name"], created_at),
                )
                partner = cur.fetchone()
            conn.commit()
    except psycopg2.errors.UniqueViolation:
        return jsonify({"message": "Email already registered"}), 400
    except psycopg2.Error as e:
        logging.error(f"[Partners] Database error registering partner: {e}")
        return jsonify({"message": "Registration failed"}), 500

    logging.info(f"[Partners] Registered partner {partner['id']} for user {user_id}")

    return jsonify({
        "id": partner["id"],
        "name": data["name"],
        "userId": user_id,
        "company_name": data["company_name"],
        "createdAt": created_at.isoformat(),
    }), 201


# --- CREATE EVENT ---
@partners_bp.route("/events", methods=["POST"])
@identity_required
def create_event(identity: Identity) -> Tuple[Response, int]:
    """
    Create an event owned by the caller's partner profile.

    Expects a JSON body with:
    - name (str)
    - description (str, optional)
    - date (str): ISO-8601 datetime.
    - location (str)

    Returns:
        201: The created event.
        400: Missing fields or invalid date.
        403: Caller is not a partner.
        500: Database error.
    """
    data: Dict[str, Any] = read_json_body()

    require_fields(data, "name", "date", "location", optional=("description",))

    event_date = parse_dt(data["date"])
    if not event_date:
        raise BadRequest("Invalid date format. Use ISO-8601.")

    sql = f"""
        INSERT INTO events (name, description, date, location, created_at, partner_id)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {EVENT_COLUMNS};
    """

    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                partner = get_partner_for_user(cur, identity.id)
                cur.execute(sql, (
                    data["name"],
                    data.get("description"),
                    event_date,
                    data["location"],
                    datetime.now(timezone.utc),
                    partner["id"],
                ))
                event = cur.fetchone()
            conn.commit()
    except psycopg2.Error as e:
        logging.error(f"[Partners] Database error creating event: {e}")
        return jsonify({"message": "Failed to create event"}), 500

    return jsonify(serialize_event(event)), 201


# --- LIST OWN EVENTS ---
@partners_bp.route("/events", methods=["GET"])
@identity_required
def list_events(identity: Identity) -> Tuple[Response, int]:
    """
    List every event belonging to the caller's partner profile.

    Returns:
        200: List of event objects.
        403: Caller is not a partner.
        500: Database error.
    """
    sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE partner_id = %s ORDER BY date, id;"

    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                partner = get_partner_for_user(cur, identity.id)
                cur.execute(sql, (partner["id"],))
                rows = [serialize_event(r) for r in cur.fetchall()]
    except psycopg2.Error as e:
        logging.error(f"[Partners] Database error listing events: {e}")
        return jsonify({"message": "Failed to retrieve events"}), 500

    return jsonify(rows), 200


# --- GET OWN EVENT ---
@partners_bp.route("/events/<int:event_id>", methods=["GET"])
@identity_required
def get_event(identity: Identity, event_id: int) -> Tuple[Response, int]:
    """
    Get one event, only if it belongs to the caller's partner profile.

    Returns:
        200: Event object.
        403: Caller is not a partner.
        404: No such event for this partner.
        500: Database error.
    """
    sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE partner_id = %s AND id = %s;"

    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                partner = get_partner_for_user(cur, identity.id)
                cur.execute(sql, (partner["id"], event_id))
                event = cur.fetchone()
    except psycopg2.Error as e:
        logging.error(f"[Partners] Database error getting event {event_id}: {e}")
        return jsonify({"message": "Failed to retrieve event"}), 500

    if not event:
        raise NotFound("Event not found")

    return jsonify(serialize_event(event)), 200
