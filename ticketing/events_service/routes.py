"""
Events service routes: public browsing of events.
Anyone can list events or read a single event; no token required.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import psycopg2
from flask import Blueprint, jsonify, request, Response

from ticketing.database.db_connection import get_db
from ticketing.errors import NotFound

events_bp = Blueprint("events", __name__)

EVENT_COLUMNS = "id, name, description, date, location, created_at, partner_id"


def parse_dt(val: Optional[str]) -> Optional[datetime]:
    """
    Safely parse an ISO-8601 or datetime-local string to a datetime object.

    Args:
        val (str): The date string to parse.

    Returns:
        datetime: The parsed timezone-aware datetime, or None if invalid.
    """
    if not val or not isinstance(val, str):
        return None
    try:
        # Handles 'YYYY-MM-DDTHH:MM' and '...Z' or '...+00:00'
        if val.endswith('Z'):
            val = val[:-1] + '+00:00'
        parsed = datetime.fromisoformat(val)
    except (ValueError, TypeError):
        return None
    # Dates without an offset are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def serialize_event(row: Any) -> Dict[str, Any]:
    """Convert an events row to a JSON-ready dict with ISO timestamps."""
    event = dict(row)
    for key in ("date", "created_at"):
        if isinstance(event.get(key), datetime):
            event[key] = event[key].isoformat()
    return event


@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Events] Response {response.status}")
    return response


@events_bp.route("/", methods=["GET"], strict_slashes=False)
def list_events() -> Tuple[Response, int]:
    """
    Return all events, soonest first.

    Returns:
        200: List of event objects.
        500: Database error.
    """
    sql = f"SELECT {EVENT_COLUMNS} FROM events ORDER BY date, id;"

    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                rows = [serialize_event(r) for r in cur.fetchall()]
    except psycopg2.Error as e:
        logging.error(f"[Events] Database error listing events: {e}")
        return jsonify({"message": "Failed to retrieve events"}), 500

    return jsonify(rows), 200


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        404: Event not found.
        500: Database error.
    """
    sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE id = %s;"

    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id,))
                event = cur.fetchone()
    except psycopg2.Error as e:
        logging.error(f"[Events] Database error getting event {event_id}: {e}")
        return jsonify({"message": "Failed to retrieve event"}), 500

    if not event:
        raise NotFound("Event not found")

    return jsonify(serialize_event(event)), 200
