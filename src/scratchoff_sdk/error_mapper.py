from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthenticationError,
    ServerError,
    ValidationError,
)

_DEFAULT_MESSAGES: dict[type[ApiError], str] = {
    AuthenticationError: "Session expired. Please login again.",
    ValidationError: "Invalid request data",
    ServerError: "Server error occurred. Please try again later.",
    ApiError: "Request failed",
}


def _server_message(payload: Mapping[str, object]) -> str | None:
    for key in ("error", "message"):
        value = payload.get(key)
        if value:
            return str(value)
    return None


def error_class_for_status(status_code: int) -> type[ApiError]:
    if status_code == 401:
        return AuthenticationError
    if status_code == 400:
        return ValidationError
    if status_code >= 500:
        return ServerError
    return ApiError


def map_error(status_code: int, payload: Mapping[str, object] | None) -> ApiError:
    payload = payload or {}
    mapped = error_class_for_status(status_code)
    message = _server_message(payload) or _DEFAULT_MESSAGES[mapped]
    code = str(payload.get("code") or f"HTTP_{status_code}")
    return mapped(
        code=code,
        message=message,
        status_code=status_code,
        details=payload.get("details"),
        raw_payload=dict(payload),
    )
