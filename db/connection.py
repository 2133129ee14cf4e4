"""
db/connection.py
----------------
Manages the process-wide PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool because repository calls are
dispatched to worker threads from the async handlers.

If the database was unreachable when the bot started, the pool is
created on the first `get_connection()` after it comes back.
"""

import threading

import psycopg2
from psycopg2 import pool
from config import DATABASE_URL, DB_POOL_MAX
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None
_lock = threading.RLock()


def init_pool(min_conn: int = 1, max_conn: int = DB_POOL_MAX) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    with _lock:
        if _pool is not None:
            return
        try:
            _pool = pool.ThreadedConnectionPool(min_conn, max_conn, DATABASE_URL)
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise


def _reconnect() -> None:
    """Create the pool and schema after a failed startup."""
    from db.init_db import create_tables

    with _lock:
        if _pool is not None:
            return
        logger.info("Database pool missing, reconnecting...")
        init_pool()
        create_tables()


def get_connection():
    """
    Get a connection from the pool, creating the pool first if needed.

    Raises:
        psycopg2.OperationalError: If the database is still unreachable.
    """
    if _pool is None:
        _reconnect()
    return _pool.getconn()


def release_connection(conn) -> None:
    """Return a connection back to the pool."""
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    with _lock:
        if _pool is not None:
            _pool.closeall()
            _pool = None
            logger.info("Database connection pool closed.")
