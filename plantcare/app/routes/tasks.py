from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool

from ..db import get_repository
from ..repositories.base import PlantRepository
from ..schemas.plant import TasksResponse
from ..services import care as care_service

app = APIRouter()


@app.get("/tasks", response_model=TasksResponse)
async def tasks(
    upcoming_days: int = Query(3, ge=0, le=60, description="Window for upcoming next-check dates"),
    repo: PlantRepository = Depends(get_repository),
):
    return await run_in_threadpool(care_service.reminders, repo, upcoming_days=upcoming_days)
