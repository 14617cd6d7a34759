import logging
from typing import Any, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymysql import MySQLError

logger = logging.getLogger(__name__)

GENERIC_DB_ERROR_MESSAGE = "Database error. Please try again later."
GENERIC_ERROR_MESSAGE = "Internal server error"
VALIDATION_ERROR_MESSAGE = "Validation failed"

# Location prefixes FastAPI adds to validation error locs
_LOC_SOURCES = {"body", "query", "path", "header", "cookie", "form"}


class PlantCareError(Exception):
    """Base for errors that map to a specific HTTP response."""

    status_code = 500
    error = "error"
    detail = GENERIC_ERROR_MESSAGE

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class PlantNotFoundError(PlantCareError):
    status_code = 404
    error = "not_found"
    detail = "Plant not found"


class CareLogNotFoundError(PlantCareError):
    status_code = 404
    error = "not_found"
    detail = "Care log not found"


class LocationNotFoundError(PlantCareError):
    status_code = 404
    error = "not_found"
    detail = "Location not found"


class DemoPlantProtectedError(PlantCareError):
    status_code = 403
    error = "demo_plant_protected"
    detail = "Cannot delete demo plant"


class UploadTooLargeError(PlantCareError):
    status_code = 413
    error = "upload_too_large"
    detail = "Uploaded file is too large"


class UnsupportedUploadError(PlantCareError):
    status_code = 400
    error = "unsupported_upload"
    detail = "Only image uploads are accepted"


class BackupIntegrityError(PlantCareError):
    status_code = 400
    error = "invalid_backup"
    detail = "Backup document is inconsistent"


def format_validation_errors(errors: Iterable[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic/FastAPI error dicts into field/message pairs."""
    result = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOC_SOURCES]
        result.append({"field": ".".join(loc) or "__root__", "message": str(err.get("msg", "Invalid value"))})
    return result


def validation_error_response(errors: Iterable[dict[str, Any]]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": VALIDATION_ERROR_MESSAGE, "errors": format_validation_errors(errors)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    - Validation failures become HTTP 400 with a field-level error list.
    - Domain errors carry their own status code and a named `error`.
    - DB-related exceptions map to HTTP 500 with a generic message.
    - Do NOT override HTTPException handling provided by FastAPI.
    """

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return validation_error_response(exc.errors())

    @app.exception_handler(PlantCareError)
    async def plant_care_error_handler(request: Request, exc: PlantCareError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "error": exc.error})

    @app.exception_handler(MySQLError)
    async def mysql_error_handler(request: Request, exc: MySQLError) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": GENERIC_DB_ERROR_MESSAGE})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR_MESSAGE})
