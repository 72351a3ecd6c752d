from __future__ import annotations

from typing import AsyncIterator

import httpx
from starlette.responses import StreamingResponse

from phixiv.core.errors import ApiError, ErrorCode
from phixiv.core.logging import get_logger
from phixiv.core.metrics import UPSTREAM_STREAM_ERRORS_TOTAL

log = get_logger(__name__)

PIXIV_REFERER = "https://www.pixiv.net/"

# pximg only serves full images to requests that look like the pixiv app.
PIXIV_APP_HEADERS: dict[str, str] = {
    "App-OS": "iOS",
    "App-OS-Version": "14.6",
    "User-Agent": "PixivIOSApp/7.13.3 (iOS 14.6; iPhone13,2)",
}

_PASSTHROUGH_HEADERS: tuple[str, ...] = (
    "content-length",
    "accept-ranges",
    "content-range",
    "last-modified",
    "etag",
)

_OK_STATUSES = frozenset({200, 206})

_CODE_BY_UPSTREAM_STATUS: dict[int, ErrorCode] = {
    403: ErrorCode.UPSTREAM_403,
    404: ErrorCode.UPSTREAM_404,
    429: ErrorCode.UPSTREAM_RATE_LIMIT,
}


def upstream_status_error(status: int) -> ApiError:
    code = _CODE_BY_UPSTREAM_STATUS.get(status, ErrorCode.UPSTREAM_STREAM_ERROR)
    return ApiError(code=code, message=code.default_message, status_code=502, details={"upstream_status": status})


def _upstream_headers(referer: str, range_header: str | None) -> dict[str, str]:
    headers = dict(PIXIV_APP_HEADERS)
    if referer:
        headers["Referer"] = referer
    if range_header:
        headers["Range"] = range_header
    return headers


async def stream_url(
    url: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    cache_control: str,
    referer: str = PIXIV_REFERER,
    timeout_s: float = 30.0,
    range_header: str | None = None,
) -> StreamingResponse:
    """Proxy ``url`` as a streaming response; the upstream client lives until the body is drained."""
    client = httpx.AsyncClient(
        transport=transport,
        follow_redirects=True,
        timeout=httpx.Timeout(timeout_s, connect=10.0),
    )
    request = client.build_request("GET", url, headers=_upstream_headers(referer, range_header))

    try:
        upstream = await client.send(request, stream=True)
    except Exception as exc:
        UPSTREAM_STREAM_ERRORS_TOTAL.inc()
        await client.aclose()
        log.warning("upstream_stream_failed url=%s err=%s", url, type(exc).__name__)
        raise ApiError(code=ErrorCode.UPSTREAM_STREAM_ERROR, message="Upstream request failed", status_code=502) from exc

    if upstream.status_code not in _OK_STATUSES:
        UPSTREAM_STREAM_ERRORS_TOTAL.inc()
        await upstream.aclose()
        await client.aclose()
        log.info("upstream_stream_status url=%s status=%s", url, upstream.status_code)
        raise upstream_status_error(upstream.status_code)

    async def _body() -> AsyncIterator[bytes]:
        try:
            async for chunk in upstream.aiter_bytes():
                yield chunk
        except Exception:
            UPSTREAM_STREAM_ERRORS_TOTAL.inc()
            raise
        finally:
            await upstream.aclose()
            await client.aclose()

    resp = StreamingResponse(
        _body(),
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type") or "application/octet-stream",
    )
    resp.headers["Cache-Control"] = cache_control
    for name in _PASSTHROUGH_HEADERS:
        value = upstream.headers.get(name)
        if value:
            resp.headers[name] = value
    return resp
