from contextlib import contextmanager

import pytest

from plantcare.app.db import schema as schema_mod
from plantcare.app.helpers.care_kinds import CareKind


@pytest.mark.parametrize("kind", list(CareKind))
def test_care_log_tables_cascade_from_plants(kind):
    ddl = schema_mod.care_log_ddl(kind)
    assert f"CREATE TABLE IF NOT EXISTS {kind.table}" in ddl
    assert "REFERENCES plants (id) ON DELETE CASCADE" in ddl
    for field in kind.detail_fields:
        assert f"{field} VARCHAR(100) NULL" in ddl


def test_plant_number_is_unique():
    assert "UNIQUE KEY uq_plants_plant_number (plant_number)" in schema_mod.PLANTS_DDL


def test_plants_table_created_before_logs():
    statements = schema_mod.all_statements()
    assert statements[0] is schema_mod.PLANTS_DDL
    assert len(statements) == 2 + len(CareKind)


def test_create_schema_executes_every_statement(monkeypatch):
    executed = []

    class _Cur:
        def execute(self, sql):
            executed.append(sql)

        def close(self):
            pass

    class _Conn:
        closed = False

        def cursor(self):
            return _Cur()

        def close(self):
            self.closed = True

    conn = _Conn()
    monkeypatch.setattr(schema_mod, "connect", _connect_to(conn))

    schema_mod.create_schema()
    assert executed == schema_mod.all_statements()
    assert conn.closed is True


def _connect_to(conn):
    @contextmanager
    def _connect():
        try:
            yield conn
        finally:
            conn.close()

    return _connect
