import logging
import time
from contextlib import contextmanager

import pymysql

from ..config import get_settings

__all__ = [
    "get_conn",
    "connect",
    "cursor",
    "transaction",
]

logger = logging.getLogger(__name__)


def get_conn():
    """Create and return a new PyMySQL connection (autocommit enabled).

    Hardened against intermittent "server has gone away" by pinging the
    connection (with reconnect) before returning it and retrying once on
    transient connection errors.
    """
    settings = get_settings()

    last_err = None
    for attempt in range(2):
        try:
            conn = pymysql.connect(
                host=settings.db_host,
                port=settings.db_port,
                user=settings.db_user,
                password=settings.db_password,
                database=settings.db_name,
                autocommit=True,
                connect_timeout=settings.db_connect_timeout,
                read_timeout=settings.db_read_timeout,
                write_timeout=settings.db_write_timeout,
                charset="utf8mb4",
                use_unicode=True,
            )
            try:
                conn.ping(reconnect=True)
            except pymysql.MySQLError:
                conn.close()
                raise
            return conn
        except pymysql.MySQLError as e:
            logger.error("Error connecting to DB: %s", e)
            last_err = e
            if attempt == 0:
                time.sleep(0.2)
                continue
            raise
    raise last_err  # type: ignore


@contextmanager
def connect():
    """Context manager that yields a DB connection and closes it afterwards."""
    conn = get_conn()
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def cursor(conn):
    """Context manager that yields a DB cursor for a given connection."""
    cur = conn.cursor()
    try:
        yield cur
    finally:
        cur.close()


@contextmanager
def transaction(conn):
    """Run a block with autocommit off; commit on success, roll back on error."""
    conn.autocommit(False)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.autocommit(True)
