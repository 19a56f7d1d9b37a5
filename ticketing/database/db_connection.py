"""
PostgreSQL connection helper.
Provides get_db() for use by services.
"""

import logging
import os
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2.extensions import connection as Connection
from psycopg2.extras import DictCursor
from psycopg2.pool import ThreadedConnectionPool
from dotenv import load_dotenv

# Load .env variables from the project root
load_dotenv()

# Pool size of 0 means "open a fresh connection per request"
DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", 0))

_pool: Optional[ThreadedConnectionPool] = None
_pool_lock = threading.Lock()


def get_database_url() -> str:
    """
    Read the database URL from the environment.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")
    return database_url


def _get_pool() -> ThreadedConnectionPool:
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = ThreadedConnectionPool(
                1, DB_POOL_MAX, get_database_url(), cursor_factory=DictCursor
            )
            logging.info(f"[DB] Connection pool created (max={DB_POOL_MAX})")
        return _pool


def connect() -> Connection:
    """
    Returns a new psycopg2 connection with dictionary-based row access.

    Rows come back as DictCursor rows (e.g. {"id": 1, "email": "..."}).
    """
    try:
        conn = psycopg2.connect(get_database_url())
        conn.cursor_factory = DictCursor
        return conn
    except psycopg2.Error as e:
        logging.error(f"[DB] Error connecting to database: {e}")
        raise


def _acquire() -> Connection:
    if DB_POOL_MAX > 0:
        return _get_pool().getconn()
    return connect()


def _release(conn: Connection) -> None:
    if DB_POOL_MAX > 0:
        _get_pool().putconn(conn)
    else:
        conn.close()


@contextmanager
def get_db() -> Iterator[Connection]:
    """
    Scoped connection acquisition.

    The connection is released on every exit path. Anything not committed
    by the caller is rolled back, so multi-statement writes that fail
    halfway leave no partial rows behind.

    Usage:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(...)
            conn.commit()
    """
    conn = _acquire()
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        _release(conn)
