"""
Care-log recording, bulk care and reminders.

Watering and feeding events denormalise onto the plant row (last_watered /
last_fed, next_check); the log insert and the plant update go to the
repository together so each plant is updated atomically.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from pymysql import MySQLError

from ..errors import GENERIC_DB_ERROR_MESSAGE, CareLogNotFoundError, PlantCareError
from ..helpers.care_kinds import CareKind
from ..helpers.care_schedule import plant_changes_for_event
from ..repositories.base import PlantRepository, Row
from ..schemas.care_log import CREATE_SCHEMAS, BulkCareRequest, CareLogCreateRequest
from ..utils.date_time import to_iso_utc, to_naive_utc, utcnow
from .plants import get_plant_row, serialize_plant

logger = logging.getLogger(__name__)


def serialize_log(kind: CareKind, row: Row) -> Dict[str, Any]:
    item: Dict[str, Any] = {
        "id": row["id"],
        "kind": kind.value,
        "plant_id": row["plant_id"],
        "occurred_at": to_iso_utc(row.get("occurred_at")),
    }
    for field in kind.detail_fields:
        item[field] = row.get(field)
    item["notes"] = row.get("notes")
    item["created_at"] = to_iso_utc(row.get("created_at"))
    return item


def list_logs(repo: PlantRepository, kind: CareKind, plant_id: int) -> List[Dict[str, Any]]:
    get_plant_row(repo, plant_id)
    return [serialize_log(kind, row) for row in repo.list_logs(kind, plant_id)]


def plant_history(repo: PlantRepository, plant_id: int) -> List[Dict[str, Any]]:
    """Every log of every kind for one plant, newest first."""
    get_plant_row(repo, plant_id)
    rows = [(kind, row) for kind in CareKind for row in repo.list_logs(kind, plant_id)]
    rows.sort(key=lambda pair: (pair[1]["occurred_at"], pair[1]["id"]), reverse=True)
    return [serialize_log(kind, row) for kind, row in rows]


def record_care(
    repo: PlantRepository,
    kind: CareKind,
    plant_id: int,
    payload: CareLogCreateRequest,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or utcnow()
    plant = get_plant_row(repo, plant_id)
    occurred_at = to_naive_utc(payload.occurred_at) or now

    values: Dict[str, Any] = {
        "plant_id": plant_id,
        "occurred_at": occurred_at,
        "notes": payload.notes,
        "created_at": now,
    }
    for field in kind.detail_fields:
        values[field] = getattr(payload, field, None)

    changes = plant_changes_for_event(plant, kind, occurred_at)
    if changes is not None:
        changes["updated_at"] = now

    row = repo.add_log(kind, values, changes)
    logger.info("Logged %s for plant id=%s at %s", kind.value, plant_id, occurred_at)
    return serialize_log(kind, row)


def delete_log(repo: PlantRepository, kind: CareKind, log_id: int) -> None:
    # The plant's last-event fields are intentionally left as they are.
    if not repo.delete_log(kind, log_id):
        raise CareLogNotFoundError()


def bulk_care(repo: PlantRepository, request: BulkCareRequest, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Apply one watering or feeding event to many plants.

    Each plant is handled on its own: a missing plant or a storage failure is
    reported in `failed` and the remaining plants are still processed.
    """
    now = now or utcnow()
    kind = request.kind
    occurred_at = to_naive_utc(request.occurred_at) or now
    payload = CREATE_SCHEMAS[kind](occurred_at=occurred_at, notes=request.notes)

    logs: List[Dict[str, Any]] = []
    updated: List[int] = []
    failed: List[Dict[str, Any]] = []
    for plant_id in dict.fromkeys(request.plant_ids):
        try:
            log = record_care(repo, kind, plant_id, payload, now=now)
        except PlantCareError as e:
            logger.warning("Bulk %s skipped plant id=%s: %s", kind.value, plant_id, e.detail)
            failed.append({"plant_id": plant_id, "detail": e.detail})
        except MySQLError:
            logger.exception("Bulk %s failed for plant id=%s", kind.value, plant_id)
            failed.append({"plant_id": plant_id, "detail": GENERIC_DB_ERROR_MESSAGE})
        else:
            logs.append(log)
            updated.append(plant_id)

    return {"kind": kind, "logs": logs, "updated_plant_ids": updated, "failed": failed}


def reminders(repo: PlantRepository, *, upcoming_days: int = 3, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Plants due for watering or feeding now, plus checks coming up soon."""
    now = now or utcnow()
    horizon = now + timedelta(days=upcoming_days)

    needs_watering, needs_feeding, upcoming = [], [], []
    for row in repo.list_plants():
        item = serialize_plant(row, now)
        if item["needs_watering"]:
            needs_watering.append(item)
        if item["needs_feeding"]:
            needs_feeding.append(item)
        next_check = row.get("next_check")
        if not item["needs_watering"] and next_check is not None and now < next_check <= horizon:
            upcoming.append(item)

    return {"needs_watering": needs_watering, "needs_feeding": needs_feeding, "upcoming": upcoming}
