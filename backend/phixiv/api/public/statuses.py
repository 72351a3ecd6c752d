from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from phixiv.api.public.deps import load_listing
from phixiv.api.public.info import parse_language_param
from phixiv.core.activity_id import PLAIN_ID_MAX, ActivityId
from phixiv.core.artwork_path import parse_unsigned
from phixiv.core.errors import ApiError, ErrorCode
from phixiv.core.request_id import get_or_create_request_id, set_request_id_header, set_request_id_on_state
from phixiv.render.api_documents import build_status_document

router = APIRouter()


def _resolve_status_id(request: Request, status_id: int) -> tuple[int, str | None, int | None]:
    """(illust_id, language, 1-based index) for a status id."""
    if status_id > PLAIN_ID_MAX:
        activity = ActivityId.unpack(status_id)
        return activity.illust_id, activity.language, activity.index + 1

    raw_index = request.query_params.get("image_index")
    index = parse_unsigned(raw_index.strip()) if raw_index is not None else None
    if raw_index is not None and index is None:
        raise ApiError(
            code=ErrorCode.BAD_REQUEST,
            message="Invalid image_index",
            status_code=400,
            details={"image_index": raw_index},
        )
    return status_id, parse_language_param(request.query_params.get("language")), index


@router.get("/api/v1/statuses/{status_id}")
async def status(request: Request, status_id: str) -> Any:
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    value = parse_unsigned(status_id)
    if value is None or value <= 0:
        raise ApiError(code=ErrorCode.BAD_REQUEST, message="Invalid status id", status_code=400)

    illust_id, language, index = _resolve_status_id(request, value)
    if illust_id <= 0:
        raise ApiError(code=ErrorCode.BAD_REQUEST, message="Invalid status id", status_code=400)

    listing = await load_listing(request, illust_id=illust_id, language=language)
    body = build_status_document(listing, status_id=str(value), position=listing.image_position(index))

    resp = JSONResponse(status_code=200, content=body)
    set_request_id_header(resp, rid)
    return resp
