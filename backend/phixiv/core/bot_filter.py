from __future__ import annotations

import re

from phixiv.core.artwork_path import ArtworkRef

PIXIV_ORIGIN = "https://www.pixiv.net"

# Chat unfurlers and crawlers that need the embed page; everyone else goes to pixiv.
_BOT_UA_RE = re.compile(
    r"(?i)("
    r"bot\b|bot/|crawler|spider|crawling|preview|embed|fetcher|"
    r"discordbot|telegrambot|twitterbot|slackbot|slack-imgproxy|facebookexternalhit|"
    r"whatsapp|skypeuripreview|linebot|mastodon|misskey|pleroma|akkoma|"
    r"vkshare|redditbot|applebot|googlebot|bingbot|yandex|baiduspider|"
    r"embedly|iframely|curl/|wget/|python-requests|python-httpx|go-http-client"
    r")"
)


def is_bot_user_agent(user_agent: str | None) -> bool:
    ua = (user_agent or "").strip()
    if not ua:
        # Unfurlers always identify themselves; an empty UA is not a browser either.
        return True
    return bool(_BOT_UA_RE.search(ua))


def pixiv_artwork_url(ref: ArtworkRef) -> str:
    lang = f"/{ref.language}" if ref.language else ""
    anchor = f"#{ref.index}" if ref.index is not None else ""
    return f"{PIXIV_ORIGIN}{lang}/artworks/{ref.illust_id}{anchor}"


def pixiv_passthrough_url(path: str, query_string: str = "") -> str:
    path_norm = path if (path or "").startswith("/") else "/" + (path or "")
    query = (query_string or "").strip()
    return f"{PIXIV_ORIGIN}{path_norm}" + (f"?{query}" if query else "")
