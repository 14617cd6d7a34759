"""Full data set export and import (plants, custom locations, all log kinds)."""
from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..errors import BackupIntegrityError
from ..helpers.care_kinds import CareKind
from ..repositories.base import LOCATION_COLUMNS, PLANT_COLUMNS, PlantRepository, Row
from ..schemas.backup import BACKUP_VERSION, BackupDocument
from ..utils.date_time import to_iso_utc, to_naive_utc, utcnow

logger = logging.getLogger(__name__)


def _render(columns: tuple[str, ...], row: Row) -> Dict[str, Any]:
    return {c: to_iso_utc(row.get(c)) if isinstance(row.get(c), datetime) else row.get(c) for c in columns}


def export_data(repo: PlantRepository, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "version": BACKUP_VERSION,
        "exported_at": to_iso_utc(now or utcnow()),
        "plants": [_render(PLANT_COLUMNS, p) for p in repo.list_plants()],
        "custom_locations": [_render(LOCATION_COLUMNS, loc) for loc in repo.list_locations()],
    }
    for kind in CareKind:
        document[kind.table] = [_render(kind.columns, r) for r in repo.list_logs(kind)]
    return document


def _duplicates(values) -> List[Any]:
    return sorted(v for v, n in Counter(values).items() if n > 1)


def _check_integrity(doc: BackupDocument) -> None:
    problems = []
    plant_ids = [p.id for p in doc.plants]
    if dup := _duplicates(plant_ids):
        problems.append(f"duplicate plant ids {dup}")
    if dup := _duplicates(p.plant_number for p in doc.plants):
        problems.append(f"duplicate plant numbers {dup}")
    if dup := _duplicates(loc.name for loc in doc.custom_locations):
        problems.append(f"duplicate location names {dup}")
    if dup := _duplicates(loc.id for loc in doc.custom_locations):
        problems.append(f"duplicate location ids {dup}")

    known = set(plant_ids)
    for kind in CareKind:
        records = getattr(doc, kind.table)
        if dup := _duplicates(r.id for r in records):
            problems.append(f"duplicate {kind.table} ids {dup}")
        orphans = sorted({r.plant_id for r in records} - known)
        if orphans:
            problems.append(f"{kind.table} reference unknown plants {orphans}")

    if problems:
        raise BackupIntegrityError("Invalid backup: " + "; ".join(problems))


def import_data(repo: PlantRepository, doc: BackupDocument, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Replace the whole data set with the document's contents, keeping ids."""
    _check_integrity(doc)
    now = now or utcnow()

    plants = []
    for p in doc.plants:
        row = p.model_dump()
        for field in ("last_watered", "last_fed", "next_check", "created_at", "updated_at"):
            row[field] = to_naive_utc(row[field])
        row["created_at"] = row["created_at"] or now
        row["updated_at"] = row["updated_at"] or row["created_at"]
        row["name"] = row["name"] or row["personal_name"]
        row["notes"] = row["notes"] or ""
        row["status"] = p.status.value
        plants.append(row)

    locations = [
        {"id": loc.id, "name": loc.name, "created_at": to_naive_utc(loc.created_at) or now}
        for loc in doc.custom_locations
    ]

    logs: Dict[CareKind, List[Row]] = {}
    for kind in CareKind:
        rows = []
        for record in getattr(doc, kind.table):
            row = {
                "id": record.id,
                "plant_id": record.plant_id,
                "occurred_at": to_naive_utc(record.occurred_at),
                "notes": record.notes,
                "created_at": to_naive_utc(record.created_at) or now,
            }
            for field in kind.detail_fields:
                row[field] = getattr(record, field)
            rows.append(row)
        logs[kind] = rows

    repo.replace_all(plants, locations, logs)
    counts = {kind.table: len(rows) for kind, rows in logs.items()}
    logger.info("Imported %d plants, %d locations, logs %s", len(plants), len(locations), counts)
    return {"ok": True, "plants": len(plants), "custom_locations": len(locations), "logs": counts}
