"""
Schema bootstrap for the ticketing database.

Creates the users, partners, customers and events tables if they are
missing. Pass --reset to truncate every table and restart the id
sequences (useful for local development and demo seeding).

Usage:
    python -m ticketing.database.init_db
    python -m ticketing.database.init_db --reset
"""

import argparse
import logging
from typing import List, Optional

from ticketing.database.db_connection import get_db

TABLES = ["users", "partners", "customers", "events"]

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS partners (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL UNIQUE REFERENCES users(id),
        company_name VARCHAR(255) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS customers (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL UNIQUE REFERENCES users(id),
        address VARCHAR(255) NOT NULL,
        phone VARCHAR(50) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS events (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        description TEXT,
        date TIMESTAMPTZ NOT NULL,
        location VARCHAR(255) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
        partner_id INTEGER NOT NULL REFERENCES partners(id)
    );

    CREATE INDEX IF NOT EXISTS idx_events_partner_id ON events (partner_id);
"""


def create_tables() -> None:
    """Create every table the services rely on."""
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
    logging.info(f"[DB] Schema ready: {', '.join(TABLES)}")


def reset_tables() -> None:
    """
    Truncate all tables and restart their id sequences.

    Destructive: every user, profile and event is removed.
    """
    sql = f"TRUNCATE TABLE {', '.join(TABLES)} RESTART IDENTITY CASCADE;"
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute(sql)
        conn.commit()
    logging.warning(f"[DB] Tables truncated: {', '.join(TABLES)}")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Initialize the ticketing database schema.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="truncate all tables after creating them",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

    create_tables()
    if args.reset:
        reset_tables()


if __name__ == "__main__":
    main()
