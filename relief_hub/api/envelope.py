"""Build the {success, data, message, count} envelope around service results."""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json", exclude_none=True)
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return jsonable_encoder(value)


def ok(
    data: Any = None,
    message: Optional[str] = None,
    count: Optional[int] = None,
    status_code: int = 200,
) -> JSONResponse:
    """Successful response. Fields left as None are omitted from the body."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = _dump(data)
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    return JSONResponse(status_code=status_code, content=body)


def fail(error: str, status_code: int, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body)
