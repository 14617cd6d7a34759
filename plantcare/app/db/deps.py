from __future__ import annotations

from typing import Callable

import pymysql
from fastapi import Depends

from ..repositories.base import PlantRepository
from ..repositories.mysql import MySQLPlantRepository
from .core import get_conn


def get_conn_factory() -> Callable[[], pymysql.connections.Connection]:
    """
    FastAPI dependency that provides a factory function to obtain a PyMySQL
    connection on demand. This is threadpool-friendly and easy to override in
    tests to supply a fake connection.
    """
    return get_conn


def get_repository(
    conn_factory: Callable[[], pymysql.connections.Connection] = Depends(get_conn_factory),
) -> PlantRepository:
    """FastAPI dependency returning the configured plant repository."""
    return MySQLPlantRepository(conn_factory)
