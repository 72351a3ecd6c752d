from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlparse

import httpx

from phixiv.core.config import DEFAULT_PIXIV_AJAX_BASE, DEFAULT_PIXIV_EMBED_BASE, DEFAULT_USER_AGENT
from phixiv.core.logging import get_logger
from phixiv.core.metrics import PIXIV_AJAX_ERRORS_TOTAL

log = get_logger(__name__)

AJAX_ILLUST_PATH = "/ajax/illust/{illust_id}"
OEMBED_PATH = "/oembed.php"
DEFAULT_LANGUAGE = "jp"

ILLUST_TYPE_UGOIRA = 2
AI_TYPE_GENERATED = 2


class PixivAjaxError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class PixivAjaxConfig:
    base_url: str = DEFAULT_PIXIV_AJAX_BASE
    embed_base_url: str = DEFAULT_PIXIV_EMBED_BASE
    user_agent: str = DEFAULT_USER_AGENT
    cookie: str = ""

    def build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
            "Referer": "https://www.pixiv.net/",
        }
        if self.cookie:
            headers["Cookie"] = f"PHPSESSID={self.cookie}"
        return headers


@dataclass(frozen=True, slots=True)
class PixivTag:
    tag: str
    translation: Mapping[str, str] = field(default_factory=dict)

    def display(self, language: str) -> str:
        return self.translation.get(language) or self.tag


@dataclass(frozen=True, slots=True)
class PixivIllust:
    illust_id: str
    title: str
    description: str
    tags: tuple[PixivTag, ...]
    regular_url: str | None
    original_url: str | None
    author_id: str
    author_name: str
    canonical_url: str
    illust_type: int
    create_date: str
    profile_image_url: str | None
    page_count: int
    ai_type: int
    bookmark_count: int
    like_count: int
    comment_count: int
    view_count: int
    x_restrict: int
    width: int = 0
    height: int = 0

    @property
    def is_ugoira(self) -> bool:
        return self.illust_type == ILLUST_TYPE_UGOIRA

    @property
    def ai_generated(self) -> bool:
        return self.ai_type == AI_TYPE_GENERATED


@dataclass(frozen=True, slots=True)
class PixivOembed:
    author_name: str
    author_url: str


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return default


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ("" if value is None else str(value))


def _parse_tags(raw: Any) -> tuple[PixivTag, ...]:
    items = raw.get("tags") if isinstance(raw, dict) else None
    out: list[PixivTag] = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        name = _as_str(item.get("tag")).strip()
        if not name:
            continue
        translation = item.get("translation")
        if isinstance(translation, dict):
            translation = {str(k): str(v) for k, v in translation.items() if isinstance(v, str) and v}
        else:
            translation = {}
        out.append(PixivTag(tag=name, translation=translation))
    return tuple(out)


def _first_profile_image_url(user_illusts: Any) -> str | None:
    if not isinstance(user_illusts, dict):
        return None
    for item in user_illusts.values():
        if not isinstance(item, dict):
            continue
        url = item.get("profileImageUrl")
        if isinstance(url, str) and url:
            return url
    return None


def _parse_illust_response(data: Any, *, illust_id: int) -> PixivIllust:
    if not isinstance(data, dict):
        raise PixivAjaxError("Invalid ajax response shape")
    if data.get("error"):
        message = _as_str(data.get("message")).strip() or "pixiv reported an error"
        raise PixivAjaxError(message, status_code=404)

    body = data.get("body")
    if not isinstance(body, dict):
        raise PixivAjaxError("Ajax response missing body")

    urls = body.get("urls") if isinstance(body.get("urls"), dict) else {}
    regular_url = urls.get("regular") if isinstance(urls.get("regular"), str) else None
    original_url = urls.get("original") if isinstance(urls.get("original"), str) else None
    if not regular_url and not original_url:
        raise PixivAjaxError("Ajax response missing image urls")

    canonical_url = f"https://www.pixiv.net/artworks/{illust_id}"
    extra = body.get("extraData")
    if isinstance(extra, dict) and isinstance(extra.get("meta"), dict):
        canonical_url = _as_str(extra["meta"].get("canonical")) or canonical_url

    return PixivIllust(
        illust_id=str(illust_id),
        title=_as_str(body.get("title")),
        description=_as_str(body.get("description")),
        tags=_parse_tags(body.get("tags")),
        regular_url=regular_url,
        original_url=original_url,
        author_id=_as_str(body.get("userId")),
        author_name=_as_str(body.get("userName")),
        canonical_url=canonical_url,
        illust_type=_as_int(body.get("illustType")),
        create_date=_as_str(body.get("createDate")),
        profile_image_url=_first_profile_image_url(body.get("userIllusts")),
        page_count=max(1, _as_int(body.get("pageCount"), 1)),
        ai_type=_as_int(body.get("aiType")),
        bookmark_count=_as_int(body.get("bookmarkCount")),
        like_count=_as_int(body.get("likeCount")),
        comment_count=_as_int(body.get("commentCount")),
        view_count=_as_int(body.get("viewCount")),
        x_restrict=_as_int(body.get("xRestrict")),
        width=_as_int(body.get("width")),
        height=_as_int(body.get("height")),
    )


async def fetch_illust(
    illust_id: int,
    *,
    language: str | None,
    config: PixivAjaxConfig,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout_s: float = 30.0,
) -> PixivIllust:
    if int(illust_id) <= 0:
        raise ValueError("illust_id must be positive")

    url = config.base_url.rstrip("/") + AJAX_ILLUST_PATH.format(illust_id=int(illust_id))
    params = {"lang": language or DEFAULT_LANGUAGE}

    try:
        async with httpx.AsyncClient(
            transport=transport,
            headers=config.build_headers(),
            timeout=httpx.Timeout(timeout_s, connect=10.0),
            follow_redirects=True,
        ) as client:
            resp = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        PIXIV_AJAX_ERRORS_TOTAL.inc()
        log.warning("pixiv_ajax_request_failed illust_id=%s err=%s", illust_id, type(exc).__name__)
        raise PixivAjaxError("Ajax request failed") from exc

    try:
        data = resp.json()
    except ValueError:
        data = None

    if resp.status_code != 200:
        PIXIV_AJAX_ERRORS_TOTAL.inc()
        log.info("pixiv_ajax_status illust_id=%s status=%s", illust_id, resp.status_code)
        message = _as_str(data.get("message")) if isinstance(data, dict) else ""
        raise PixivAjaxError(message or "Ajax lookup failed", status_code=resp.status_code)

    try:
        return _parse_illust_response(data, illust_id=int(illust_id))
    except PixivAjaxError:
        PIXIV_AJAX_ERRORS_TOTAL.inc()
        raise


def is_pixiv_page_url(url: str) -> bool:
    try:
        parsed = urlparse((url or "").strip())
    except ValueError:
        return False
    return parsed.scheme.lower() in {"http", "https"} and (parsed.hostname or "").lower() == "www.pixiv.net"


async def fetch_oembed(
    url: str,
    *,
    config: PixivAjaxConfig,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout_s: float = 30.0,
) -> PixivOembed:
    if not is_pixiv_page_url(url):
        raise ValueError("url must point at www.pixiv.net")

    endpoint = config.embed_base_url.rstrip("/") + OEMBED_PATH

    try:
        async with httpx.AsyncClient(
            transport=transport,
            headers={"User-Agent": config.user_agent},
            timeout=httpx.Timeout(timeout_s, connect=10.0),
            follow_redirects=True,
        ) as client:
            resp = await client.get(endpoint, params={"url": url.strip()})
    except httpx.HTTPError as exc:
        PIXIV_AJAX_ERRORS_TOTAL.inc()
        raise PixivAjaxError("oEmbed request failed") from exc

    if resp.status_code != 200:
        PIXIV_AJAX_ERRORS_TOTAL.inc()
        raise PixivAjaxError("oEmbed lookup failed", status_code=resp.status_code)

    try:
        data = resp.json()
    except ValueError as exc:
        raise PixivAjaxError("oEmbed response is not JSON", status_code=resp.status_code) from exc

    if not isinstance(data, dict) or not isinstance(data.get("author_name"), str):
        raise PixivAjaxError("oEmbed response missing author_name")

    return PixivOembed(
        author_name=data["author_name"],
        author_url=_as_str(data.get("author_url")) or "https://www.pixiv.net/",
    )
