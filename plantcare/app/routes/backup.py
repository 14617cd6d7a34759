from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from ..db import get_repository
from ..repositories.base import PlantRepository
from ..schemas.backup import BackupDocument, ImportResponse
from ..services import backup as backup_service

app = APIRouter(prefix="/backup")


@app.get("/export")
async def export_backup(repo: PlantRepository = Depends(get_repository)):
    return await run_in_threadpool(backup_service.export_data, repo)


@app.post("/import", response_model=ImportResponse)
async def import_backup(payload: BackupDocument, repo: PlantRepository = Depends(get_repository)):
    """Replace all plants, custom locations and care logs with the document's contents."""
    return await run_in_threadpool(backup_service.import_data, repo, payload)
