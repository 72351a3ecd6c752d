from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping
from urllib.parse import urlparse

from phixiv.core.logging import get_logger

log = get_logger(__name__)

DEFAULT_PROVIDER_NAME = "phixiv"
DEFAULT_PROVIDER_URL = "https://github.com/HazelTheWitch/phixiv"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
)
DEFAULT_PXIMG_BASE = "https://i.pximg.net/"
DEFAULT_PIXIV_AJAX_BASE = "https://www.pixiv.net"
DEFAULT_PIXIV_EMBED_BASE = "https://embed.pixiv.net"


@dataclass(frozen=True, slots=True)
class Settings:
    app_env: str
    port: int
    log_level: str
    provider_name: str
    provider_url: str
    pixiv_cookie: str
    user_agent: str
    pixiv_ajax_base: str
    pixiv_embed_base: str
    pximg_base: str
    bot_filtering: bool
    thumbnail_type: str
    http_timeout_s: float
    ugoira_enabled: bool = False

    @property
    def is_prod(self) -> bool:
        return self.app_env in {"prod", "production"}


def _get(env: Mapping[str, str], key: str, default: str) -> str:
    value = env.get(key, default)
    return value.strip()


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = _get(env, key, "1" if default else "0").lower()
    if raw in {"1", "true", "yes", "y", "on"}:
        return True
    if raw in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _require_http_url(key: str, value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme.lower() not in {"http", "https"} or not parsed.hostname:
        raise ValueError(f"{key} must be an http(s) url")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env

    app_env = _get(env, "APP_ENV", "dev").lower()

    try:
        port = int(_get(env, "PORT", "3000") or "3000")
    except ValueError:
        port = 3000
    port = max(1, min(int(port), 65535))

    pximg_base = _require_http_url("PXIMG_BASE", _get(env, "PXIMG_BASE", DEFAULT_PXIMG_BASE) or DEFAULT_PXIMG_BASE)
    if not pximg_base.endswith("/"):
        pximg_base += "/"

    pixiv_ajax_base = _require_http_url(
        "PIXIV_AJAX_BASE", _get(env, "PIXIV_AJAX_BASE", DEFAULT_PIXIV_AJAX_BASE) or DEFAULT_PIXIV_AJAX_BASE
    ).rstrip("/")
    pixiv_embed_base = _require_http_url(
        "PIXIV_EMBED_BASE", _get(env, "PIXIV_EMBED_BASE", DEFAULT_PIXIV_EMBED_BASE) or DEFAULT_PIXIV_EMBED_BASE
    ).rstrip("/")

    try:
        http_timeout_s = float(_get(env, "HTTP_TIMEOUT_SECONDS", "30") or "30")
    except ValueError:
        http_timeout_s = 30.0
    http_timeout_s = max(1.0, min(float(http_timeout_s), 120.0))

    settings = Settings(
        app_env=app_env,
        port=port,
        log_level=_get(env, "LOG_LEVEL", "info").lower() or "info",
        provider_name=_get(env, "PROVIDER_NAME", DEFAULT_PROVIDER_NAME) or DEFAULT_PROVIDER_NAME,
        provider_url=_get(env, "PROVIDER_URL", DEFAULT_PROVIDER_URL) or DEFAULT_PROVIDER_URL,
        pixiv_cookie=_get(env, "PIXIV_COOKIE", ""),
        user_agent=_get(env, "USER_AGENT", DEFAULT_USER_AGENT) or DEFAULT_USER_AGENT,
        pixiv_ajax_base=pixiv_ajax_base,
        pixiv_embed_base=pixiv_embed_base,
        pximg_base=pximg_base,
        bot_filtering=_get_bool(env, "BOT_FILTERING", False),
        thumbnail_type=_get(env, "THUMBNAIL_TYPE", ""),
        http_timeout_s=http_timeout_s,
        ugoira_enabled=_get_bool(env, "UGOIRA_ENABLED", False),
    )

    if settings.is_prod and not settings.pixiv_cookie:
        log.warning("pixiv_cookie_missing app_env=%s restricted artworks will fail", settings.app_env)

    return settings
