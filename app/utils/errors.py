"""Utility helpers for standardized error responses."""
from typing import Any, Sequence


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a standardized error payload."""

    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return payload


def validation_error_response(errors: Sequence[dict[str, Any]]) -> dict[str, Any]:
    """Flatten pydantic/FastAPI validation errors into the standard payload."""

    field_errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]
    return error_response("VALIDATION_ERROR", "Dados inválidos", {"errors": field_errors})
