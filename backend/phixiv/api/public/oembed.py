from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from phixiv.api.public.deps import ajax_config, api_error_from_ajax, get_settings, get_transport
from phixiv.core.errors import ApiError, ErrorCode
from phixiv.core.request_id import get_or_create_request_id, set_request_id_header, set_request_id_on_state
from phixiv.pixiv.ajax import PixivAjaxError, fetch_oembed, is_pixiv_page_url
from phixiv.render.api_documents import build_oembed_document, pixiv_user_url

router = APIRouter()


def _json(body: dict[str, Any], rid: str) -> JSONResponse:
    resp = JSONResponse(status_code=200, content=body)
    set_request_id_header(resp, rid)
    return resp


@router.get("/e")
async def embed_oembed(request: Request) -> Any:
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    author_name = (request.query_params.get("n") or "").strip()
    if not author_name:
        raise ApiError(code=ErrorCode.BAD_REQUEST, message="Missing author name", status_code=400)

    settings = get_settings(request)
    body = build_oembed_document(
        author_name=author_name,
        author_url=pixiv_user_url(request.query_params.get("i")),
        provider_name=settings.provider_name,
        provider_url=settings.provider_url,
    )
    return _json(body, rid)


@router.get("/oembed")
async def pixiv_oembed(request: Request) -> Any:
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    url = (request.query_params.get("url") or "").strip()
    if not is_pixiv_page_url(url):
        raise ApiError(
            code=ErrorCode.UNSUPPORTED_URL,
            message="Only www.pixiv.net urls are supported",
            status_code=400,
            details={"url": url},
        )

    settings = get_settings(request)
    try:
        oembed = await fetch_oembed(
            url,
            config=ajax_config(settings),
            transport=get_transport(request),
            timeout_s=settings.http_timeout_s,
        )
    except PixivAjaxError as exc:
        raise api_error_from_ajax(exc) from exc

    body = build_oembed_document(
        author_name=oembed.author_name,
        author_url=oembed.author_url,
        provider_name=settings.provider_name,
        provider_url=settings.provider_url,
    )
    return _json(body, rid)
