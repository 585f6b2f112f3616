"""Exception handlers: every failure leaves the API as {success: false, error, details?}."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from relief_hub.api.envelope import fail
from relief_hub.services.errors import AppError
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.api.errors")


def validation_details(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Group pydantic errors per field as [{field, constraints: {type: message}}]."""
    by_field: dict[str, dict[str, str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        constraints = by_field.setdefault(field, {})
        constraints.setdefault(err.get("type", "invalid"), err.get("msg", "Invalid value"))
    return [{"field": field, "constraints": constraints} for field, constraints in by_field.items()]


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.info(
        "api.error.app",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.message,
    )
    return fail(exc.message, exc.status_code, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = validation_details(list(exc.errors()))
    logger.info("api.error.validation", path=request.url.path, fields=[d["field"] for d in details])
    return fail("Validation failed", 400, details)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return fail(str(exc.detail), exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api.error.unhandled", path=request.url.path, error=str(exc))
    return fail("Internal server error", 500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
