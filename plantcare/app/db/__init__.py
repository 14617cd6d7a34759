from .core import connect, cursor, get_conn, transaction
from .deps import get_conn_factory, get_repository

__all__ = [
    "get_conn",
    "connect",
    "cursor",
    "transaction",
    "get_conn_factory",
    "get_repository",
]
