"""PyMySQL implementation of the PlantRepository contract."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pymysql

from ..db.core import transaction
from ..helpers.care_kinds import CareKind
from .base import LOCATION_COLUMNS, PLANT_COLUMNS, Row

_PLANT_SELECT = "SELECT " + ", ".join(PLANT_COLUMNS) + " FROM plants"
_PLANT_WRITABLE = frozenset(PLANT_COLUMNS) - {"id"}
_SEARCH_COLUMNS = ("personal_name", "common_name", "COALESCE(scientific_name, '')", "COALESCE(notes, '')")


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally (escape char `!`)."""
    return text.replace("!", "!!").replace("%", "!%").replace("_", "!_")


def _to_row(columns: tuple[str, ...], values) -> Row:
    return dict(zip(columns, values))


def _assignments(changes: Row, allowed: frozenset) -> tuple[str, list]:
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"Unknown plant columns: {sorted(unknown)}")
    keys = sorted(changes)
    return ", ".join(f"{k}=%s" for k in keys), [changes[k] for k in keys]


class MySQLPlantRepository:
    """
    Plant journal storage on MySQL.

    A fresh connection is taken from `conn_factory` per call and closed
    afterwards. Multi-statement writes (care events, imports) run inside one
    transaction.
    """

    def __init__(self, conn_factory: Callable[[], pymysql.connections.Connection]):
        self._conn_factory = conn_factory

    # --- Plants ---------------------------------------------------------------

    def list_plants(self, search: Optional[str] = None, location: Optional[str] = None) -> List[Row]:
        query = _PLANT_SELECT
        where = []
        params: list[Any] = []
        if search:
            like = f"%{_escape_like(search.strip().lower())}%"
            where.append(
                "(" + " OR ".join(f"LOWER({col}) LIKE %s ESCAPE '!'" for col in _SEARCH_COLUMNS) + ")"
            )
            params.extend([like] * len(_SEARCH_COLUMNS))
        if location:
            where.append("location = %s")
            params.append(location)
        if where:
            query += " WHERE " + " AND ".join(where)
        query += " ORDER BY plant_number ASC, id ASC"

        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [_to_row(PLANT_COLUMNS, r) for r in cur.fetchall() or []]
        finally:
            conn.close()

    def get_plant(self, plant_id: int) -> Optional[Row]:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                return self._fetch_plant(cur, plant_id)
        finally:
            conn.close()

    def used_plant_numbers(self) -> List[int]:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT plant_number FROM plants ORDER BY plant_number ASC")
                return [r[0] for r in cur.fetchall() or []]
        finally:
            conn.close()

    def count_plants(self) -> int:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT COUNT(*) FROM plants")
                row = cur.fetchone()
                return int(row[0]) if row else 0
        finally:
            conn.close()

    def create_plant(self, values: Row) -> Row:
        keys = [k for k in PLANT_COLUMNS if k != "id" and k in values]
        sql = "INSERT INTO plants ({}) VALUES ({})".format(", ".join(keys), ", ".join(["%s"] * len(keys)))
        conn = self._conn_factory()
        try:
            with transaction(conn):
                with conn.cursor() as cur:
                    cur.execute(sql, [values[k] for k in keys])
                    new_id = cur.lastrowid
                    return self._fetch_plant(cur, new_id)
        finally:
            conn.close()

    def update_plant(self, plant_id: int, changes: Row) -> Optional[Row]:
        conn = self._conn_factory()
        try:
            with transaction(conn):
                with conn.cursor() as cur:
                    if self._fetch_plant(cur, plant_id) is None:
                        return None
                    if changes:
                        assignments, params = _assignments(changes, _PLANT_WRITABLE)
                        cur.execute(f"UPDATE plants SET {assignments} WHERE id=%s", params + [plant_id])
                    return self._fetch_plant(cur, plant_id)
        finally:
            conn.close()

    def delete_plant(self, plant_id: int) -> bool:
        # Care logs go with the plant through ON DELETE CASCADE.
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM plants WHERE id=%s", (plant_id,))
                return cur.rowcount > 0
        finally:
            conn.close()

    @staticmethod
    def _fetch_plant(cur, plant_id: int) -> Optional[Row]:
        cur.execute(_PLANT_SELECT + " WHERE id=%s", (plant_id,))
        row = cur.fetchone()
        return _to_row(PLANT_COLUMNS, row) if row else None

    # --- Care logs ------------------------------------------------------------

    def list_logs(self, kind: CareKind, plant_id: Optional[int] = None) -> List[Row]:
        query = f"SELECT {', '.join(kind.columns)} FROM {kind.table}"
        params: list[Any] = []
        if plant_id is not None:
            query += " WHERE plant_id=%s"
            params.append(plant_id)
        query += " ORDER BY occurred_at DESC, id DESC"
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [_to_row(kind.columns, r) for r in cur.fetchall() or []]
        finally:
            conn.close()

    def add_log(self, kind: CareKind, values: Row, plant_changes: Optional[Row] = None) -> Row:
        keys = [c for c in kind.columns if c != "id"]
        insert_sql = "INSERT INTO {} ({}) VALUES ({})".format(
            kind.table, ", ".join(keys), ", ".join(["%s"] * len(keys))
        )
        conn = self._conn_factory()
        try:
            with transaction(conn):
                with conn.cursor() as cur:
                    cur.execute(insert_sql, [values.get(k) for k in keys])
                    new_id = cur.lastrowid
                    if plant_changes:
                        assignments, params = _assignments(plant_changes, _PLANT_WRITABLE)
                        cur.execute(
                            f"UPDATE plants SET {assignments} WHERE id=%s",
                            params + [values["plant_id"]],
                        )
                    cur.execute(
                        f"SELECT {', '.join(kind.columns)} FROM {kind.table} WHERE id=%s",
                        (new_id,),
                    )
                    return _to_row(kind.columns, cur.fetchone())
        finally:
            conn.close()

    def delete_log(self, kind: CareKind, log_id: int) -> bool:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute(f"DELETE FROM {kind.table} WHERE id=%s", (log_id,))
                return cur.rowcount > 0
        finally:
            conn.close()

    # --- Custom locations -----------------------------------------------------

    def list_locations(self) -> List[Row]:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT id, name, created_at FROM custom_locations ORDER BY name ASC")
                return [_to_row(LOCATION_COLUMNS, r) for r in cur.fetchall() or []]
        finally:
            conn.close()

    def get_location_by_name(self, name: str) -> Optional[Row]:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT id, name, created_at FROM custom_locations WHERE name=%s LIMIT 1", (name,))
                row = cur.fetchone()
                return _to_row(LOCATION_COLUMNS, row) if row else None
        finally:
            conn.close()

    def create_location(self, name: str, created_at) -> Row:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO custom_locations (name, created_at) VALUES (%s, %s)",
                    (name, created_at),
                )
                return {"id": cur.lastrowid, "name": name, "created_at": created_at}
        finally:
            conn.close()

    def delete_location(self, location_id: int) -> bool:
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM custom_locations WHERE id=%s", (location_id,))
                return cur.rowcount > 0
        finally:
            conn.close()

    # --- Backup ---------------------------------------------------------------

    def replace_all(self, plants: List[Row], locations: List[Row], logs: Dict[CareKind, List[Row]]) -> None:
        conn = self._conn_factory()
        try:
            with transaction(conn):
                with conn.cursor() as cur:
                    # Order matters due to FKs. Delete child tables first.
                    for kind in CareKind:
                        cur.execute(f"DELETE FROM {kind.table}")
                    cur.execute("DELETE FROM custom_locations")
                    cur.execute("DELETE FROM plants")

                    if plants:
                        cur.executemany(
                            "INSERT INTO plants ({}) VALUES ({})".format(
                                ", ".join(PLANT_COLUMNS), ", ".join(["%s"] * len(PLANT_COLUMNS))
                            ),
                            [[p.get(c) for c in PLANT_COLUMNS] for p in plants],
                        )
                    if locations:
                        cur.executemany(
                            "INSERT INTO custom_locations (id, name, created_at) VALUES (%s, %s, %s)",
                            [[loc.get(c) for c in LOCATION_COLUMNS] for loc in locations],
                        )
                    for kind in CareKind:
                        rows = logs.get(kind) or []
                        if not rows:
                            continue
                        cur.executemany(
                            "INSERT INTO {} ({}) VALUES ({})".format(
                                kind.table, ", ".join(kind.columns), ", ".join(["%s"] * len(kind.columns))
                            ),
                            [[r.get(c) for c in kind.columns] for r in rows],
                        )
        finally:
            conn.close()
