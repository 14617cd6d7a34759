"""
Storage contract for plants, care logs and custom locations.

Rows cross this boundary as plain dicts keyed by column name, with naive UTC
datetimes. The storage layer owns identity: ids are assigned on insert.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from ..helpers.care_kinds import CareKind

Row = Dict[str, Any]

PLANT_COLUMNS = (
    "id",
    "plant_number",
    "name",
    "personal_name",
    "common_name",
    "scientific_name",
    "location",
    "watering_frequency_days",
    "feeding_frequency_days",
    "last_watered",
    "last_fed",
    "next_check",
    "notes",
    "image_url",
    "status",
    "created_at",
    "updated_at",
)

LOCATION_COLUMNS = ("id", "name", "created_at")


class PlantRepository(Protocol):
    # Plants
    def list_plants(self, search: Optional[str] = None, location: Optional[str] = None) -> List[Row]: ...

    def get_plant(self, plant_id: int) -> Optional[Row]: ...

    def used_plant_numbers(self) -> List[int]: ...

    def count_plants(self) -> int: ...

    def create_plant(self, values: Row) -> Row: ...

    def update_plant(self, plant_id: int, changes: Row) -> Optional[Row]: ...

    def delete_plant(self, plant_id: int) -> bool: ...

    # Care logs
    def list_logs(self, kind: CareKind, plant_id: Optional[int] = None) -> List[Row]: ...

    def add_log(self, kind: CareKind, values: Row, plant_changes: Optional[Row] = None) -> Row:
        """Insert a log and apply `plant_changes` to its plant atomically."""
        ...

    def delete_log(self, kind: CareKind, log_id: int) -> bool: ...

    # Custom locations
    def list_locations(self) -> List[Row]: ...

    def get_location_by_name(self, name: str) -> Optional[Row]: ...

    def create_location(self, name: str, created_at: Any) -> Row: ...

    def delete_location(self, location_id: int) -> bool: ...

    # Backup
    def replace_all(self, plants: List[Row], locations: List[Row], logs: Dict[CareKind, List[Row]]) -> None:
        """Replace the whole data set in one transaction, preserving ids."""
        ...
