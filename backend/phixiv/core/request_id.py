from __future__ import annotations

import re
import secrets
from types import SimpleNamespace
from typing import Any, Mapping

from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-Id"
REQUEST_ID_PREFIX = "req_"

# Client supplied ids are echoed back in headers; keep them short and printable.
_CLIENT_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")


def new_request_id() -> str:
    return REQUEST_ID_PREFIX + secrets.token_hex(8)


def get_request_id_from_headers(headers: Mapping[str, str] | None) -> str | None:
    raw = None
    for name in (REQUEST_ID_HEADER, REQUEST_ID_HEADER.lower()):
        raw = (headers or {}).get(name)
        if raw:
            break
    candidate = (raw or "").strip()
    return candidate if _CLIENT_REQUEST_ID_RE.match(candidate) else None


def set_request_id_on_state(request: Any, request_id: str) -> None:
    if getattr(request, "state", None) is None:
        request.state = SimpleNamespace()
    request.state.request_id = request_id


def set_request_id_header(response: Any, request_id: str) -> None:
    if getattr(response, "headers", None) is None:
        response.headers = {}
    response.headers[REQUEST_ID_HEADER] = request_id


def get_or_create_request_id(request: Any) -> str:
    existing = getattr(getattr(request, "state", None), "request_id", None)
    if existing:
        return str(existing)
    return get_request_id_from_headers(getattr(request, "headers", None)) or new_request_id()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Pins one request id per request and echoes it on every response."""

    async def dispatch(self, request, call_next):  # type: ignore[no-untyped-def]
        request_id = get_or_create_request_id(request)
        set_request_id_on_state(request, request_id)
        response = await call_next(request)
        set_request_id_header(response, request_id)
        return response
