from fastapi import APIRouter, Depends, Response
from starlette.concurrency import run_in_threadpool

from ..db import get_repository
from ..errors import LocationNotFoundError
from ..repositories.base import PlantRepository
from ..schemas.location import LocationCreateRequest, LocationItem
from ..schemas.plant import DeleteResponse
from ..utils.date_time import to_iso_utc, utcnow

app = APIRouter()


def _item(row) -> LocationItem:
    return LocationItem(id=row["id"], name=row["name"], created_at=to_iso_utc(row.get("created_at")))


@app.get("/locations", response_model=list[LocationItem])
async def list_locations(repo: PlantRepository = Depends(get_repository)):
    rows = await run_in_threadpool(repo.list_locations)
    return [_item(r) for r in rows]


@app.post("/locations", response_model=LocationItem, status_code=201)
async def create_location(
    payload: LocationCreateRequest,
    response: Response,
    repo: PlantRepository = Depends(get_repository),
):
    name = payload.name

    def do_create():
        # Creating an existing name returns the existing row
        existing = repo.get_location_by_name(name)
        if existing:
            return existing, False
        return repo.create_location(name, utcnow()), True

    row, created = await run_in_threadpool(do_create)
    if not created:
        response.status_code = 200
    return _item(row)


@app.delete("/locations/{location_id}", response_model=DeleteResponse)
async def delete_location(location_id: int, repo: PlantRepository = Depends(get_repository)):
    deleted = await run_in_threadpool(repo.delete_location, location_id)
    if not deleted:
        raise LocationNotFoundError()
    return DeleteResponse()
