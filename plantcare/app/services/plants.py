"""
Plant registry operations on top of the repository.

Plant numbers are assigned here by first-gap search; ids, by contrast, are
owned by the storage layer.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import pymysql
from pymysql.constants import ER

from ..errors import DemoPlantProtectedError, PlantNotFoundError
from ..helpers.care_schedule import SCHEDULE_FIELDS, annotate_due, next_check_for
from ..helpers.plant_number import next_plant_number
from ..repositories.base import PlantRepository, Row
from ..schemas.plant import PlantCreateRequest, PlantStatus, PlantUpdateRequest
from ..utils.date_time import to_iso_utc, to_naive_utc, utcnow

logger = logging.getLogger(__name__)

DEMO_PLANT_NUMBER = 1
PLANT_DATETIME_FIELDS = ("last_watered", "last_fed", "next_check", "created_at", "updated_at")

DEMO_PLANT = {
    "personal_name": "Monty",
    "common_name": "Swiss cheese plant",
    "scientific_name": "Monstera deliciosa",
    "location": "living_room",
    "watering_frequency_days": 7,
    "feeding_frequency_days": 14,
    "notes": "Demo plant. Try logging a watering!",
}


def serialize_plant(row: Row, now: datetime) -> Dict[str, Any]:
    """Render a stored plant row for the API, including read-time due fields."""
    item = annotate_due(row, now)
    for field in PLANT_DATETIME_FIELDS:
        item[field] = to_iso_utc(item.get(field))
    item["common_name"] = item.get("common_name") or ""
    item["location"] = item.get("location") or ""
    item["notes"] = item.get("notes") or ""
    return item


def get_plant_row(repo: PlantRepository, plant_id: int) -> Row:
    row = repo.get_plant(plant_id)
    if row is None:
        raise PlantNotFoundError()
    return row


def list_plants(
    repo: PlantRepository,
    *,
    search: Optional[str] = None,
    location: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    now = now or utcnow()
    return [serialize_plant(row, now) for row in repo.list_plants(search=search, location=location)]


def get_plant(repo: PlantRepository, plant_id: int, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    return serialize_plant(get_plant_row(repo, plant_id), now or utcnow())


def _insert_plant(repo: PlantRepository, values: Dict[str, Any], now: datetime) -> Row:
    if values.get("next_check") is None:
        values["next_check"] = next_check_for(values)
    # Legacy display name mirrors the personal name
    values["name"] = values["personal_name"]
    values["created_at"] = now
    values["updated_at"] = now
    values["plant_number"] = next_plant_number(repo.used_plant_numbers())
    try:
        return repo.create_plant(values)
    except pymysql.err.IntegrityError as e:
        if e.args[0] != ER.DUP_ENTRY:
            raise
        # A concurrent create took the same number; take the next gap once
        logger.warning("Plant number %s taken concurrently, retrying", values["plant_number"])
    values["plant_number"] = next_plant_number(repo.used_plant_numbers())
    return repo.create_plant(values)


def create_plant(
    repo: PlantRepository,
    payload: PlantCreateRequest,
    *,
    image_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or utcnow()
    values = payload.model_dump()
    for field in ("last_watered", "last_fed", "next_check"):
        values[field] = to_naive_utc(values[field])
    values["status"] = payload.status.value
    if image_url:
        values["image_url"] = image_url

    row = _insert_plant(repo, values, now)
    logger.info("Created plant id=%s number=%s", row["id"], row["plant_number"])
    return serialize_plant(row, now)


def update_plant(
    repo: PlantRepository,
    plant_id: int,
    payload: PlantUpdateRequest,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or utcnow()
    current = get_plant_row(repo, plant_id)

    changes = payload.model_dump(exclude_unset=True)
    for field in ("last_watered", "last_fed", "next_check"):
        if field in changes:
            changes[field] = to_naive_utc(changes[field])
    if isinstance(changes.get("status"), PlantStatus):
        changes["status"] = changes["status"].value
    if "personal_name" in changes:
        changes["name"] = changes["personal_name"]
    if "next_check" not in changes and any(f in changes for f in SCHEDULE_FIELDS):
        changes["next_check"] = next_check_for({**current, **changes})
    changes["updated_at"] = now

    row = repo.update_plant(plant_id, changes)
    if row is None:
        raise PlantNotFoundError()
    return serialize_plant(row, now)


def delete_plant(repo: PlantRepository, plant_id: int, *, demo_mode: bool = False) -> None:
    plant = get_plant_row(repo, plant_id)
    if demo_mode and plant["plant_number"] == DEMO_PLANT_NUMBER:
        logger.warning("Refused to delete demo plant id=%s", plant_id)
        raise DemoPlantProtectedError()
    if not repo.delete_plant(plant_id):
        raise PlantNotFoundError()
    logger.info("Deleted plant id=%s number=%s", plant_id, plant["plant_number"])


def seed_demo_plant(repo: PlantRepository, *, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
    """Create the demo plant when the registry is empty. Idempotent."""
    if repo.count_plants() > 0:
        return None
    now = now or utcnow()
    values: Dict[str, Any] = {
        **DEMO_PLANT,
        "last_watered": None,
        "last_fed": None,
        "next_check": None,
        "image_url": None,
        "status": PlantStatus.HEALTHY.value,
    }
    row = _insert_plant(repo, values, now)
    logger.info("Seeded demo plant id=%s", row["id"])
    return serialize_plant(row, now)
