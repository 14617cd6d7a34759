"""
Helpers for due-date and "needs care" computations.

All datetimes here are naive UTC, matching what is stored in the database.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional

from .care_kinds import CareKind

DEFAULT_WATERING_FREQUENCY_DAYS = 7
DEFAULT_FEEDING_FREQUENCY_DAYS = 14

# Plant fields that feed into next_check
SCHEDULE_FIELDS = ("last_watered", "last_fed", "watering_frequency_days", "feeding_frequency_days")


def elapsed_days(last_event: datetime, now: datetime) -> int:
    """Whole days between last_event and now (floored)."""
    return (now - last_event) // timedelta(days=1)


def needs_care(last_event: Optional[datetime], interval_days: int, now: datetime) -> bool:
    if last_event is None:
        return True
    return elapsed_days(last_event, now) >= interval_days


def days_until_due(last_event: Optional[datetime], interval_days: int, now: datetime) -> int:
    if last_event is None:
        return 0
    return max(0, interval_days - elapsed_days(last_event, now))


def compute_next_check(
    last_watered: Optional[datetime],
    watering_frequency_days: int,
    last_fed: Optional[datetime],
    feeding_frequency_days: int,
) -> Optional[datetime]:
    """Earlier of the next due watering and the next due feeding, or None."""
    candidates = []
    if last_watered is not None:
        candidates.append(last_watered + timedelta(days=watering_frequency_days))
    if last_fed is not None:
        candidates.append(last_fed + timedelta(days=feeding_frequency_days))
    return min(candidates) if candidates else None


def next_check_for(plant: Mapping[str, Any]) -> Optional[datetime]:
    return compute_next_check(
        plant.get("last_watered"),
        plant.get("watering_frequency_days") or DEFAULT_WATERING_FREQUENCY_DAYS,
        plant.get("last_fed"),
        plant.get("feeding_frequency_days") or DEFAULT_FEEDING_FREQUENCY_DAYS,
    )


def plant_changes_for_event(
    plant: Mapping[str, Any],
    kind: CareKind,
    occurred_at: datetime,
) -> Optional[Dict[str, Any]]:
    """
    Plant columns to update when a care event of `kind` is logged.

    Only watering and feeding touch the plant: the matching last-event field
    is set to the event time and next_check is recomputed from the merged
    values. A watering also resets status to healthy. Other kinds return None.
    """
    field = kind.plant_event_field
    if field is None:
        return None
    changes: Dict[str, Any] = {field: occurred_at}
    if kind is CareKind.WATERING:
        changes["status"] = "healthy"
    merged = {**plant, **changes}
    changes["next_check"] = next_check_for(merged)
    return changes


def annotate_due(plant: Mapping[str, Any], now: datetime) -> Dict[str, Any]:
    """Return a copy of the plant row with read-time derived fields added."""
    watering_days = plant.get("watering_frequency_days") or DEFAULT_WATERING_FREQUENCY_DAYS
    feeding_days = plant.get("feeding_frequency_days") or DEFAULT_FEEDING_FREQUENCY_DAYS
    return {
        **plant,
        "needs_watering": needs_care(plant.get("last_watered"), watering_days, now),
        "needs_feeding": needs_care(plant.get("last_fed"), feeding_days, now),
        "days_until_watering": days_until_due(plant.get("last_watered"), watering_days, now),
        "days_until_feeding": days_until_due(plant.get("last_fed"), feeding_days, now),
    }
