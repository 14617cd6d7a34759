"""
Registry of the five care-log kinds.

Every kind shares the same row shape (plant_id, occurred_at, notes,
created_at) and adds a few optional free-text detail columns.
"""

from enum import Enum


class CareKind(str, Enum):
    WATERING = "watering"
    FEEDING = "feeding"
    REPOTTING = "repotting"
    SOIL_TOP_UP = "soil-top-up"
    PRUNING = "pruning"

    @property
    def table(self) -> str:
        """Table name, also used as the collection key in exports."""
        return self.value.replace("-", "_") + "_logs"

    @property
    def detail_fields(self) -> tuple[str, ...]:
        return _DETAIL_FIELDS[self]

    @property
    def columns(self) -> tuple[str, ...]:
        return ("id", "plant_id", "occurred_at") + self.detail_fields + ("notes", "created_at")

    @property
    def plant_event_field(self) -> str | None:
        """Plant column denormalised from this kind of event, if any."""
        return _PLANT_EVENT_FIELDS.get(self)


_DETAIL_FIELDS: dict[CareKind, tuple[str, ...]] = {
    CareKind.WATERING: ("amount",),
    CareKind.FEEDING: ("fertilizer", "amount"),
    CareKind.REPOTTING: ("pot_size", "soil_type"),
    CareKind.SOIL_TOP_UP: ("soil_type", "amount"),
    CareKind.PRUNING: ("parts_removed", "reason"),
}

_PLANT_EVENT_FIELDS: dict[CareKind, str] = {
    CareKind.WATERING: "last_watered",
    CareKind.FEEDING: "last_fed",
}

# Kinds accepted by bulk care
BULK_KINDS = (CareKind.WATERING, CareKind.FEEDING)
