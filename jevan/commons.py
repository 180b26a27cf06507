"""Shared response payloads and JSON helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from bson import ObjectId


@dataclass
class ApiErrorResponsePayload:
    """Body returned to API clients when a request fails."""

    status: str
    message: str
    additional_info: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status, "message": self.message}
        if self.additional_info:
            result["additional_info"] = self.additional_info
        return result


def _to_jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, ObjectId):
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serialisable")


def print_struct(payload: Any) -> str:
    """Render a payload as compact JSON, or an empty string if it cannot be."""
    try:
        return json.dumps(
            payload,
            default=_to_jsonable,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError):
        return ""


def api_error_response(
    message: str, additional_info: dict[str, Any] | None = None
) -> ApiErrorResponsePayload:
    """Build an error payload, keeping additional info only when it is not empty."""
    return ApiErrorResponsePayload(
        status="Error",
        message=message,
        additional_info=additional_info or None,
    )