from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from ..db import get_repository
from ..repositories.base import PlantRepository
from ..schemas.care_log import BulkCareRequest, BulkCareResponse
from ..services import care as care_service

app = APIRouter()


@app.post("/bulk-care", response_model=BulkCareResponse)
async def bulk_care(payload: BulkCareRequest, repo: PlantRepository = Depends(get_repository)):
    """Log the same watering or feeding event for several plants.

    Plants are processed independently; unknown ids are reported in `failed`.
    """
    return await run_in_threadpool(care_service.bulk_care, repo, payload)
