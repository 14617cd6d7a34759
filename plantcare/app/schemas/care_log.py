from datetime import datetime
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, Field, field_validator

from ..helpers.care_kinds import BULK_KINDS, CareKind

DetailText = Optional[str]


class CareLogCreateRequest(BaseModel):
    # Event time; defaults to now when omitted
    occurred_at: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class WateringLogCreateRequest(CareLogCreateRequest):
    amount: DetailText = Field(default=None, max_length=100)


class FeedingLogCreateRequest(CareLogCreateRequest):
    fertilizer: DetailText = Field(default=None, max_length=100)
    amount: DetailText = Field(default=None, max_length=100)


class RepottingLogCreateRequest(CareLogCreateRequest):
    pot_size: DetailText = Field(default=None, max_length=100)
    soil_type: DetailText = Field(default=None, max_length=100)


class SoilTopUpLogCreateRequest(CareLogCreateRequest):
    soil_type: DetailText = Field(default=None, max_length=100)
    amount: DetailText = Field(default=None, max_length=100)


class PruningLogCreateRequest(CareLogCreateRequest):
    parts_removed: DetailText = Field(default=None, max_length=100)
    reason: DetailText = Field(default=None, max_length=100)


CREATE_SCHEMAS: Dict[CareKind, Type[CareLogCreateRequest]] = {
    CareKind.WATERING: WateringLogCreateRequest,
    CareKind.FEEDING: FeedingLogCreateRequest,
    CareKind.REPOTTING: RepottingLogCreateRequest,
    CareKind.SOIL_TOP_UP: SoilTopUpLogCreateRequest,
    CareKind.PRUNING: PruningLogCreateRequest,
}


class BulkCareRequest(BaseModel):
    plant_ids: List[int] = Field(min_length=1)
    kind: CareKind
    occurred_at: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("kind")
    @classmethod
    def only_watering_or_feeding(cls, v: CareKind) -> CareKind:
        if v not in BULK_KINDS:
            raise ValueError("Bulk care supports only watering and feeding")
        return v


class BulkCareFailure(BaseModel):
    plant_id: int
    detail: str


class BulkCareResponse(BaseModel):
    kind: CareKind
    logs: List[dict]
    updated_plant_ids: List[int]
    failed: List[BulkCareFailure]
