"""Uniform JSON envelope used by every REST response."""
from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def envelope(success: bool, message: str, data: Any = None, errors: Optional[List[str]] = None,
             include_data: bool = True) -> dict:
    body = {"success": success, "message": message}
    if include_data:
        body["data"] = jsonable_encoder(data)
    if errors:
        body["errors"] = list(errors)
    body["timestamp"] = timestamp()
    return body


def success_response(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(True, message, data))


def error_response(message: str = "Error occurred", status_code: int = 500,
                   errors: Optional[List[str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(False, message, errors=errors, include_data=False),
    )


def not_found_response(resource: str = "Resource") -> JSONResponse:
    return error_response(f"{resource} not found", 404)


def validation_error_response(errors: List[str], message: str = "Validation failed") -> JSONResponse:
    return error_response(message, 400, errors=errors)
