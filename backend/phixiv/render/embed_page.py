from __future__ import annotations

import html
from urllib.parse import urlencode

from phixiv.core.activity_id import ActivityId
from phixiv.core.hosts import is_caption_free_host
from phixiv.core.logging import get_logger
from phixiv.pixiv.caption import extract_inner_text
from phixiv.pixiv.listing import ArtworkListing

log = get_logger(__name__)

AI_GENERATED_PREFIX = "[AI Generated] "
THEME_COLOR = "#0096FA"


def _e(value: object) -> str:
    return html.escape(str(value if value is not None else ""), quote=True)


def build_embed_description(listing: ArtworkListing, *, host: str) -> str:
    caption = "" if is_caption_free_host(host) else extract_inner_text(listing.description)
    prefix = AI_GENERATED_PREFIX if listing.ai_generated else ""
    parts = [prefix + caption, ", ".join(listing.tags)]
    return "\n".join(p for p in parts if p)


def _activity_id(listing: ArtworkListing, position: int) -> int | None:
    try:
        return ActivityId(language=listing.language, illust_id=int(listing.illust_id), index=position).pack()
    except ValueError:
        log.info("activity_id_unavailable illust_id=%s index=%s", listing.illust_id, position)
        return None


def _video_tags(listing: ArtworkListing) -> str:
    if listing.video_url is None:
        return ""
    tags = [
        f'<meta property="og:video" content="{_e(listing.video_url)}">',
        f'<meta property="og:video:secure_url" content="{_e(listing.video_url)}">',
        '<meta property="og:video:type" content="video/mp4">',
    ]
    if listing.width > 0 and listing.height > 0:
        tags.append(f'<meta property="og:video:width" content="{listing.width}">')
        tags.append(f'<meta property="og:video:height" content="{listing.height}">')
    return "\n".join(tags) + "\n"


def build_embed_html(listing: ArtworkListing, *, index: int | None, host: str, site_name: str) -> str:
    position = listing.image_position(index)
    image_url = listing.still_image_url(position)
    description = build_embed_description(listing, host=host)
    alt_text = ", ".join(listing.tags)

    oembed_query = {"n": listing.author_name}
    if listing.author_id:
        oembed_query["i"] = listing.author_id
    oembed_url = f"https://{host}/e?{urlencode(oembed_query)}"

    activity_id = _activity_id(listing, position)
    activity_link = ""
    if activity_id is not None:
        activity_url = f"https://{host}/api/v1/statuses/{activity_id}"
        activity_link = f'<link rel="alternate" type="application/activity+json" href="{_e(activity_url)}">\n'

    og_type = "video.other" if listing.video_url else "article"
    video_tags = _video_tags(listing)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="theme-color" content="{THEME_COLOR}">
<meta property="og:site_name" content="{_e(site_name)}">
<meta property="og:title" content="{_e(listing.title)}">
<meta property="og:description" content="{_e(description)}">
<meta property="og:url" content="{_e(listing.url)}">
<meta property="og:type" content="{og_type}">
<meta property="og:image" content="{_e(image_url)}">
<meta property="og:image:alt" content="{_e(alt_text)}">
{video_tags}<meta name="twitter:card" content="summary_large_image">
<meta name="twitter:image" content="{_e(image_url)}">
<meta name="twitter:title" content="{_e(listing.title)}">
<meta name="twitter:creator" content="{_e(listing.author_name)}">
<link rel="alternate" type="application/json+oembed" href="{_e(oembed_url)}">
{activity_link}<link rel="canonical" href="{_e(listing.url)}">
<meta http-equiv="refresh" content="0; url={_e(listing.url)}">
<title>{_e(listing.title)}</title>
</head>
<body>
<a href="{_e(listing.url)}">{_e(listing.title)}</a> by {_e(listing.author_name)}
</body>
</html>
"""
