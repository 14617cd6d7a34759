from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PlantStatus(str, Enum):
    HEALTHY = "healthy"
    CHECK_SOON = "check_soon"
    NEEDS_WATER = "needs_water"
    UNHEALTHY = "unhealthy"


def normalize(s: str) -> str:
    """Trim and collapse internal whitespace."""
    return " ".join((s or "").split())


class PlantItem(BaseModel):
    id: int
    plant_number: int
    name: str
    personal_name: str
    common_name: str = ""
    scientific_name: Optional[str] = None
    location: str = ""
    watering_frequency_days: int
    feeding_frequency_days: int
    last_watered: Optional[str] = None
    last_fed: Optional[str] = None
    next_check: Optional[str] = None
    notes: str = ""
    image_url: Optional[str] = None
    status: str = PlantStatus.HEALTHY.value
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    # Derived at read time
    needs_watering: bool
    needs_feeding: bool
    days_until_watering: int
    days_until_feeding: int


class PlantCreateRequest(BaseModel):
    # Only personal_name is required
    personal_name: str = Field(max_length=100)
    common_name: str = Field(default="", max_length=150)
    scientific_name: Optional[str] = Field(default=None, max_length=150)
    location: str = Field(default="", max_length=50)
    watering_frequency_days: int = Field(default=7, ge=1, le=365)
    feeding_frequency_days: int = Field(default=14, ge=1, le=365)
    last_watered: Optional[datetime] = None
    last_fed: Optional[datetime] = None
    next_check: Optional[datetime] = None
    notes: str = ""
    image_url: Optional[str] = None
    status: PlantStatus = PlantStatus.HEALTHY

    @field_validator("personal_name")
    @classmethod
    def personal_name_not_blank(cls, v: str) -> str:
        v = normalize(v)
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("common_name", "location", "notes", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v


class PlantUpdateRequest(BaseModel):
    # Partial patch: only fields present in the body are applied
    personal_name: Optional[str] = Field(default=None, max_length=100)
    common_name: Optional[str] = Field(default=None, max_length=150)
    scientific_name: Optional[str] = Field(default=None, max_length=150)
    location: Optional[str] = Field(default=None, max_length=50)
    watering_frequency_days: Optional[int] = Field(default=None, ge=1, le=365)
    feeding_frequency_days: Optional[int] = Field(default=None, ge=1, le=365)
    last_watered: Optional[datetime] = None
    last_fed: Optional[datetime] = None
    next_check: Optional[datetime] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[PlantStatus] = None

    @field_validator("personal_name")
    @classmethod
    def personal_name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Name cannot be empty")
        v = normalize(v)
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("watering_frequency_days", "feeding_frequency_days")
    @classmethod
    def frequency_not_null(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            raise ValueError("Frequency cannot be null")
        return v

    @field_validator("common_name", "location", "notes", "status")
    @classmethod
    def column_not_null(cls, v):
        # Stored as NOT NULL; clear text fields with "" instead
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class DeleteResponse(BaseModel):
    ok: bool = True


class TasksResponse(BaseModel):
    needs_watering: list[PlantItem]
    needs_feeding: list[PlantItem]
    upcoming: list[PlantItem]
