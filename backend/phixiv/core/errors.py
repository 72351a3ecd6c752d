from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi.responses import JSONResponse

UNKNOWN_REQUEST_ID = "req_unknown"


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNSUPPORTED_URL = "UNSUPPORTED_URL"
    UPSTREAM_STREAM_ERROR = "UPSTREAM_STREAM_ERROR"
    UPSTREAM_403 = "UPSTREAM_403"
    UPSTREAM_404 = "UPSTREAM_404"
    UPSTREAM_RATE_LIMIT = "UPSTREAM_RATE_LIMIT"

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES.get(self, "Request failed")


_DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.BAD_REQUEST: "Bad request",
    ErrorCode.NOT_FOUND: "Artwork not found",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
    ErrorCode.UNSUPPORTED_URL: "Unsupported url",
    ErrorCode.UPSTREAM_STREAM_ERROR: "Upstream request failed",
    ErrorCode.UPSTREAM_403: "Upstream forbidden (403)",
    ErrorCode.UPSTREAM_404: "Upstream not found (404)",
    ErrorCode.UPSTREAM_RATE_LIMIT: "Upstream rate limited (429)",
}


@dataclass(frozen=True, slots=True)
class ApiError(Exception):
    code: ErrorCode
    message: str
    status_code: int = 400
    details: dict[str, Any] | None = None


def normalize_error_message(*, code: ErrorCode, message: str) -> str:
    return str(message or "").strip() or code.default_message


def error_body(
    *,
    code: ErrorCode,
    message: str,
    request_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "ok": False,
        "code": code.value,
        "message": normalize_error_message(code=code, message=message),
        "request_id": (request_id or "").strip() or UNKNOWN_REQUEST_ID,
        "details": dict(details or {}),
    }


def _request_id_of(request: Any | None) -> str | None:
    if request is None:
        return None
    from_state = getattr(getattr(request, "state", None), "request_id", None)
    if from_state:
        return str(from_state)
    return request.headers.get("X-Request-Id")


def json_error_response(
    *,
    code: ErrorCode,
    message: str,
    status_code: int,
    request: Any | None = None,
    request_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = error_body(
        code=code,
        message=message,
        request_id=request_id if request_id is not None else _request_id_of(request),
        details=details,
    )
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={"X-Request-Id": body["request_id"], "Cache-Control": "no-store"},
    )
