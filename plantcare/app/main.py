import logging
import os
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from .config import get_settings
from .db import get_conn
from .db.schema import create_schema
from .errors import register_exception_handlers
from .repositories.mysql import MySQLPlantRepository
from .routes.backup import app as backup_app
from .routes.bulk_care import app as bulk_care_app
from .routes.care_logs import app as care_logs_app
from .routes.health import app as health_app
from .routes.locations import app as locations_app
from .routes.plants import app as plants_app
from .routes.tasks import app as tasks_app
from .services.plants import seed_demo_plant
from .services.uploads import UPLOAD_URL_PREFIX

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    os.makedirs(settings.upload_dir, exist_ok=True)
    if settings.db_auto_create:
        logger.info("Creating tables in %s", settings.db_name)
        await run_in_threadpool(create_schema)
    if settings.demo_mode:
        await run_in_threadpool(seed_demo_plant, MySQLPlantRepository(get_conn))
    yield


app = FastAPI(title="Plant Care Journal", lifespan=lifespan)

# Register global exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount all routers under /api
api_router = APIRouter(prefix="/api")
api_router.include_router(health_app)
api_router.include_router(plants_app)
api_router.include_router(care_logs_app)
api_router.include_router(bulk_care_app)
api_router.include_router(tasks_app)
api_router.include_router(locations_app)
api_router.include_router(backup_app)

app.include_router(api_router)

# Uploaded plant images
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


# Top-level health endpoint for container health checks and uptime probes
@app.get("/health")
async def health_root():
    return {"status": "ok"}
