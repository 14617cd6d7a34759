import os
from dataclasses import replace
from typing import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from plantcare.app.config import Settings, get_settings
from plantcare.app.db import get_repository

# Import the real FastAPI app
from plantcare.app.main import app as real_app

from factories import InMemoryPlantRepository


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    # Let anyio know we use asyncio
    return "asyncio"


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """Provide the FastAPI application for tests.

    Dependency overrides are wired by the `repo` and `settings` fixtures.
    """
    return real_app


@pytest.fixture(autouse=True)
def _override_test_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point DB env vars at test values so nothing can reach the runtime database."""
    monkeypatch.setenv("TEST_MODE", "1")
    monkeypatch.setenv("DB_HOST", os.getenv("TEST_DB_HOST", "db"))
    monkeypatch.setenv("DB_NAME", os.getenv("TEST_DB_NAME", "plantcare_test"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        db_name="plantcare_test",
        test_mode=True,
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
    )


@pytest.fixture
def repo(app: FastAPI, settings: Settings) -> Iterator[InMemoryPlantRepository]:
    """Swap the MySQL repository (and settings) for in-memory test doubles."""
    memory = InMemoryPlantRepository()
    app.dependency_overrides[get_repository] = lambda: memory
    app.dependency_overrides[get_settings] = lambda: settings
    yield memory
    app.dependency_overrides.clear()


@pytest.fixture
def demo_mode(app: FastAPI, settings: Settings, repo: InMemoryPlantRepository) -> Settings:
    demo_settings = replace(settings, demo_mode=True)
    app.dependency_overrides[get_settings] = lambda: demo_settings
    return demo_settings


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """httpx AsyncClient bound to the ASGI app.

    Prefer this for async endpoint testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
