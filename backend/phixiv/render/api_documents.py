from __future__ import annotations

from typing import Any
from urllib.parse import quote

from phixiv.core.time import rfc3339_to_iso_utc_ms
from phixiv.pixiv.listing import ArtworkListing

OEMBED_VERSION = "1.0"
PIXIV_HOME = "https://www.pixiv.net/"


def pixiv_user_url(author_id: str | None) -> str:
    author_id = (author_id or "").strip()
    if not author_id:
        return PIXIV_HOME
    return f"https://www.pixiv.net/users/{quote(author_id, safe='')}"


def build_oembed_document(
    *,
    author_name: str,
    author_url: str,
    provider_name: str,
    provider_url: str,
) -> dict[str, Any]:
    return {
        "version": OEMBED_VERSION,
        "type": "rich",
        "author_name": author_name,
        "author_url": author_url,
        "provider_name": provider_name,
        "provider_url": provider_url,
    }


def build_status_document(listing: ArtworkListing, *, status_id: str, position: int) -> dict[str, Any]:
    """Mastodon ``Status`` entity describing one artwork image.

    Discord reads this through the ``application/activity+json`` link on the
    embed page; only the fields it renders carry real data.
    """
    created_at = rfc3339_to_iso_utc_ms(listing.create_date) or listing.create_date
    image_url = listing.image_proxy_urls[position] if listing.image_proxy_urls else ""
    media_type = "gifv" if listing.video_url else "image"
    account_url = pixiv_user_url(listing.author_id)

    return {
        "id": status_id,
        "url": listing.url,
        "uri": listing.url,
        "created_at": created_at,
        "edited_at": None,
        "reblog": None,
        "language": "en",
        "content": listing.description,
        "spoiler_text": "",
        "visibility": "public",
        "application": {"name": "Twitter Web App", "website": None},
        "media_attachments": [
            {
                "id": status_id,
                "type": media_type,
                "url": image_url,
                "preview_url": listing.still_image_url(position),
                "remote_url": None,
                "preview_remote_url": None,
                "text_url": None,
                "description": "",
                "meta": {},
            }
        ],
        "account": {
            "id": listing.author_id,
            "display_name": listing.author_name,
            "username": listing.author_name,
            "acct": listing.author_name,
            "url": account_url,
            "uri": account_url,
            "created_at": created_at,
            "locked": False,
            "bot": False,
            "discoverable": True,
            "indexable": False,
            "group": False,
            "avatar": listing.profile_image_url,
            "avatar_static": listing.profile_image_url,
            "header": None,
            "header_static": None,
            "followers_count": 0,
            "following_count": 0,
            "statuses_count": 0,
            "hide_collections": False,
            "noindex": False,
            "emojis": [],
            "roles": [],
            "fields": [],
        },
        "mentions": [],
        "tags": [],
        "emojis": [],
        "card": None,
        "poll": None,
    }
