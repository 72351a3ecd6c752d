from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from phixiv.api.public.deps import get_settings, get_transport
from phixiv.core.errors import ApiError, ErrorCode
from phixiv.core.http_stream import stream_url
from phixiv.core.request_id import get_or_create_request_id, set_request_id_header, set_request_id_on_state

router = APIRouter()

IMAGE_CACHE_CONTROL = "public, max-age=86400"


def _is_safe_segment(segment: str) -> bool:
    return segment not in {"", ".", ".."} and "\\" not in segment


@router.get("/i/{path_first}/{path_rest:path}")
async def image_proxy(request: Request, path_first: str, path_rest: str) -> Any:
    segments = [path_first, *path_rest.split("/")]
    if not all(_is_safe_segment(seg) for seg in segments):
        raise ApiError(code=ErrorCode.BAD_REQUEST, message="Unsupported image path", status_code=400)

    settings = get_settings(request)
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    upstream_url = settings.pximg_base + "/".join(segments)
    resp = await stream_url(
        upstream_url,
        transport=get_transport(request),
        cache_control=IMAGE_CACHE_CONTROL,
        timeout_s=settings.http_timeout_s,
        range_header=request.headers.get("range"),
    )
    set_request_id_header(resp, rid)
    return resp
