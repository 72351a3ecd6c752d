from __future__ import annotations

from typing import Any

from fastapi import Request

from phixiv.core.config import Settings, load_settings
from phixiv.core.errors import ApiError, ErrorCode
from phixiv.pixiv.ajax import PixivAjaxConfig, PixivAjaxError, fetch_illust
from phixiv.pixiv.listing import ArtworkListing, build_listing


def get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        settings = load_settings()
        request.app.state.settings = settings
    return settings


def get_transport(request: Request) -> Any | None:
    return getattr(request.app.state, "httpx_transport", None)


def request_host(request: Request) -> str:
    host = (request.headers.get("host") or "").strip()
    return host or request.url.netloc


def ajax_config(settings: Settings) -> PixivAjaxConfig:
    return PixivAjaxConfig(
        base_url=settings.pixiv_ajax_base,
        embed_base_url=settings.pixiv_embed_base,
        user_agent=settings.user_agent,
        cookie=settings.pixiv_cookie,
    )


def api_error_from_ajax(exc: PixivAjaxError, *, illust_id: int | None = None) -> ApiError:
    details: dict[str, Any] = {"upstream_status": exc.status_code}
    if illust_id is not None:
        details["illust_id"] = str(illust_id)
    if exc.status_code == 404:
        return ApiError(code=ErrorCode.NOT_FOUND, message="Artwork not found", status_code=404, details=details)
    if exc.status_code == 403:
        return ApiError(code=ErrorCode.UPSTREAM_403, message="Upstream forbidden (403)", status_code=502, details=details)
    if exc.status_code == 429:
        return ApiError(
            code=ErrorCode.UPSTREAM_RATE_LIMIT, message="Upstream rate limited (429)", status_code=502, details=details
        )
    return ApiError(code=ErrorCode.UPSTREAM_STREAM_ERROR, message="Upstream request failed", status_code=502, details=details)


async def load_listing(request: Request, *, illust_id: int, language: str | None) -> ArtworkListing:
    settings = get_settings(request)
    try:
        illust = await fetch_illust(
            illust_id,
            language=language,
            config=ajax_config(settings),
            transport=get_transport(request),
            timeout_s=settings.http_timeout_s,
        )
    except PixivAjaxError as exc:
        raise api_error_from_ajax(exc, illust_id=illust_id) from exc

    return build_listing(
        illust,
        language=language,
        host=request_host(request),
        thumbnail_type=settings.thumbnail_type,
        ugoira_enabled=settings.ugoira_enabled,
    )
