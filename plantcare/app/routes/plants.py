from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from ..config import Settings, get_settings
from ..db import get_repository
from ..repositories.base import PlantRepository
from ..schemas.plant import DeleteResponse, PlantCreateRequest, PlantItem, PlantUpdateRequest
from ..services import plants as plants_service
from ..services.uploads import discard_image, store_image
from ..utils.validation import parse_model

app = APIRouter()


@app.get("/plants", response_model=list[PlantItem])
async def list_plants(
    search: Optional[str] = Query(default=None, max_length=100),
    location: Optional[str] = Query(default=None, max_length=50),
    repo: PlantRepository = Depends(get_repository),
):
    return await run_in_threadpool(plants_service.list_plants, repo, search=search, location=location)


async def _read_create_body(request: Request) -> tuple[dict, Optional[UploadFile]]:
    """Accept plant fields as JSON, or as form fields with an optional image."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        # Empty form fields fall back to model defaults
        data = {k: v for k, v in form.items() if not isinstance(v, UploadFile) and v != ""}
        image = form.get("image")
        if isinstance(image, UploadFile) and image.filename:
            return data, image
        return data, None

    try:
        data = await request.json()
    except ValueError:
        raise RequestValidationError([{"loc": ("body",), "msg": "Body must be a JSON object", "type": "json_invalid"}])
    return data, None


@app.post("/plants", response_model=PlantItem, status_code=201)
async def create_plant(
    request: Request,
    repo: PlantRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    data, image = await _read_create_body(request)
    payload = parse_model(PlantCreateRequest, data)
    # Validate fields before storing anything; then store the image, then the row
    image_url = await store_image(image, settings) if image is not None else None
    try:
        return await run_in_threadpool(plants_service.create_plant, repo, payload, image_url=image_url)
    except Exception:
        if image_url:
            await run_in_threadpool(discard_image, image_url, settings)
        raise


@app.get("/plants/{plant_id}", response_model=PlantItem)
async def get_plant(plant_id: int, repo: PlantRepository = Depends(get_repository)):
    return await run_in_threadpool(plants_service.get_plant, repo, plant_id)


@app.put("/plants/{plant_id}", response_model=PlantItem)
@app.patch("/plants/{plant_id}", response_model=PlantItem)
async def update_plant(
    plant_id: int,
    payload: PlantUpdateRequest,
    repo: PlantRepository = Depends(get_repository),
):
    return await run_in_threadpool(plants_service.update_plant, repo, plant_id, payload)


@app.delete("/plants/{plant_id}", response_model=DeleteResponse)
async def delete_plant(
    plant_id: int,
    repo: PlantRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    await run_in_threadpool(plants_service.delete_plant, repo, plant_id, demo_mode=settings.demo_mode)
    return DeleteResponse()
