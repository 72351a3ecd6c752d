from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from phixiv.api.public.deps import load_listing
from phixiv.core.artwork_path import normalize_language, parse_unsigned
from phixiv.core.errors import ApiError, ErrorCode
from phixiv.core.request_id import get_or_create_request_id, set_request_id_header, set_request_id_on_state

router = APIRouter()


def parse_language_param(raw: str | None) -> str | None:
    if raw is None or not raw.strip():
        return None
    language = normalize_language(raw)
    if language is None:
        raise ApiError(
            code=ErrorCode.BAD_REQUEST,
            message="Unsupported language",
            status_code=400,
            details={"language": raw},
        )
    return language


@router.get("/api/info")
async def artwork_info(request: Request) -> Any:
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    raw_id = request.query_params.get("id")
    illust_id = parse_unsigned((raw_id or "").strip())
    if illust_id is None or illust_id <= 0:
        raise ApiError(code=ErrorCode.BAD_REQUEST, message="Invalid id", status_code=400, details={"id": raw_id})

    language = parse_language_param(request.query_params.get("language"))
    listing = await load_listing(request, illust_id=illust_id, language=language)

    resp = JSONResponse(status_code=200, content=listing.to_dict())
    set_request_id_header(resp, rid)
    return resp
