from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from starlette.concurrency import run_in_threadpool

from ..db import get_repository
from ..helpers.care_kinds import CareKind
from ..repositories.base import PlantRepository
from ..schemas.plant import DeleteResponse
from ..schemas.care_log import CREATE_SCHEMAS
from ..services import care as care_service
from ..utils.validation import parse_model

app = APIRouter()


@app.get("/plants/{plant_id}/history")
async def plant_history(plant_id: int, repo: PlantRepository = Depends(get_repository)):
    return await run_in_threadpool(care_service.plant_history, repo, plant_id)


# One set of routes serves all five kinds: watering, feeding, repotting,
# soil-top-up and pruning.
@app.get("/plants/{plant_id}/{kind}-logs")
async def list_care_logs(plant_id: int, kind: CareKind, repo: PlantRepository = Depends(get_repository)):
    return await run_in_threadpool(care_service.list_logs, repo, kind, plant_id)


@app.post("/plants/{plant_id}/{kind}-logs", status_code=201)
async def create_care_log(
    plant_id: int,
    kind: CareKind,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    repo: PlantRepository = Depends(get_repository),
):
    data = parse_model(CREATE_SCHEMAS[kind], payload or {})
    return await run_in_threadpool(care_service.record_care, repo, kind, plant_id, data)


@app.delete("/{kind}-logs/{log_id}", response_model=DeleteResponse)
async def delete_care_log(kind: CareKind, log_id: int, repo: PlantRepository = Depends(get_repository)):
    await run_in_threadpool(care_service.delete_log, repo, kind, log_id)
    return DeleteResponse()
