from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from phixiv.api.public.deps import get_settings, load_listing, request_host
from phixiv.core.artwork_path import ArtworkRef, PathMatchError, match_artwork_path
from phixiv.core.bot_filter import is_bot_user_agent, pixiv_artwork_url, pixiv_passthrough_url
from phixiv.core.errors import ApiError, ErrorCode
from phixiv.core.hosts import is_image_host
from phixiv.core.logging import get_logger
from phixiv.core.metrics import observe_embed_result, observe_path_match
from phixiv.core.request_id import get_or_create_request_id, set_request_id_header, set_request_id_on_state
from phixiv.render.embed_page import build_embed_html

log = get_logger(__name__)

router = APIRouter()


def _match_metric(error: PathMatchError | None) -> str:
    return error.value if error is not None else "ok"


async def render_artwork(request: Request, ref: ArtworkRef) -> Any:
    settings = get_settings(request)
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    started = time.monotonic()
    result = "error"
    try:
        if settings.bot_filtering and not is_bot_user_agent(request.headers.get("user-agent")):
            result = "bot_redirect"
            resp: Any = RedirectResponse(pixiv_artwork_url(ref), status_code=307)
            set_request_id_header(resp, rid)
            return resp

        try:
            listing = await load_listing(request, illust_id=ref.illust_id, language=ref.language)
        except ApiError as exc:
            result = "not_found" if exc.code is ErrorCode.NOT_FOUND else "upstream_error"
            raise

        html = build_embed_html(
            listing,
            index=ref.index,
            host=request_host(request),
            site_name=settings.provider_name,
        )
        result = "ok"
        resp = HTMLResponse(content=html, status_code=200, headers={"Cache-Control": "no-cache"})
        set_request_id_header(resp, rid)
        return resp
    finally:
        observe_embed_result(result=result, duration_s=time.monotonic() - started)


@router.get("/", include_in_schema=False)
async def home(request: Request) -> RedirectResponse:
    return RedirectResponse(get_settings(request).provider_url, status_code=307)


@router.get("/{full_path:path}", include_in_schema=False)
async def artwork_or_passthrough(request: Request, full_path: str) -> Any:
    path = request.url.path
    query = request.url.query

    if is_image_host(request_host(request)):
        # Image hosts serve only the proxy.
        raise ApiError(code=ErrorCode.NOT_FOUND, message="Image not found", status_code=404, details={"path": path})

    match = match_artwork_path(path, query)
    observe_path_match(_match_metric(match.error))

    if match.ref is None:
        log.debug("artwork_path_no_match path=%s reason=%s", path, match.error.value if match.error else "")
        return RedirectResponse(pixiv_passthrough_url(path, query), status_code=307)

    if match.error is PathMatchError.MALFORMED_INDEX:
        log.debug("artwork_index_dropped path=%s illust_id=%s", path, match.ref.illust_id)

    return await render_artwork(request, match.ref)
