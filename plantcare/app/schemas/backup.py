from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .care_log import DetailText
from .plant import PlantStatus, normalize

BACKUP_VERSION = 1


def _name_not_blank(v: str) -> str:
    v = normalize(v)
    if not v:
        raise ValueError("Name cannot be empty")
    return v


class PlantRecord(BaseModel):
    id: int = Field(ge=1)
    plant_number: int = Field(ge=1)
    name: Optional[str] = Field(default=None, max_length=100)
    personal_name: str = Field(max_length=100)
    common_name: str = Field(default="", max_length=150)
    scientific_name: Optional[str] = Field(default=None, max_length=150)
    location: str = Field(default="", max_length=50)
    watering_frequency_days: int = Field(default=7, ge=1, le=365)
    feeding_frequency_days: int = Field(default=14, ge=1, le=365)
    last_watered: Optional[datetime] = None
    last_fed: Optional[datetime] = None
    next_check: Optional[datetime] = None
    notes: Optional[str] = ""
    image_url: Optional[str] = None
    status: PlantStatus = PlantStatus.HEALTHY
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("personal_name")
    @classmethod
    def personal_name_not_blank(cls, v: str) -> str:
        return _name_not_blank(v)

    @field_validator("name")
    @classmethod
    def name_normalized(cls, v: Optional[str]) -> Optional[str]:
        # Blank legacy names fall back to personal_name on import
        if v is None:
            return None
        return normalize(v) or None


class LocationRecord(BaseModel):
    id: int = Field(ge=1)
    name: str = Field(max_length=50)
    created_at: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _name_not_blank(v)


class CareLogRecord(BaseModel):
    id: int = Field(ge=1)
    plant_id: int = Field(ge=1)
    occurred_at: datetime
    notes: Optional[str] = Field(default=None, max_length=2000)
    created_at: Optional[datetime] = None


# Detail columns are VARCHAR(100), as on the create path
class WateringLogRecord(CareLogRecord):
    amount: DetailText = Field(default=None, max_length=100)


class FeedingLogRecord(CareLogRecord):
    fertilizer: DetailText = Field(default=None, max_length=100)
    amount: DetailText = Field(default=None, max_length=100)


class RepottingLogRecord(CareLogRecord):
    pot_size: DetailText = Field(default=None, max_length=100)
    soil_type: DetailText = Field(default=None, max_length=100)


class SoilTopUpLogRecord(CareLogRecord):
    soil_type: DetailText = Field(default=None, max_length=100)
    amount: DetailText = Field(default=None, max_length=100)


class PruningLogRecord(CareLogRecord):
    parts_removed: DetailText = Field(default=None, max_length=100)
    reason: DetailText = Field(default=None, max_length=100)


class BackupDocument(BaseModel):
    version: int = BACKUP_VERSION
    exported_at: Optional[datetime] = None
    plants: List[PlantRecord] = []
    custom_locations: List[LocationRecord] = []
    watering_logs: List[WateringLogRecord] = []
    feeding_logs: List[FeedingLogRecord] = []
    repotting_logs: List[RepottingLogRecord] = []
    soil_top_up_logs: List[SoilTopUpLogRecord] = []
    pruning_logs: List[PruningLogRecord] = []

    @field_validator("version")
    @classmethod
    def supported_version(cls, v: int) -> int:
        if v != BACKUP_VERSION:
            raise ValueError(f"Unsupported backup version {v}, expected {BACKUP_VERSION}")
        return v


class ImportResponse(BaseModel):
    ok: bool = True
    plants: int
    custom_locations: int
    logs: dict
