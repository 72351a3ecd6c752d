from __future__ import annotations

from dataclasses import replace

from phixiv.pixiv.listing import ArtworkListing
from phixiv.render.api_documents import build_oembed_document, build_status_document, pixiv_user_url


def _listing() -> ArtworkListing:
    return ArtworkListing(
        image_proxy_urls=["https://h/i/a_p0.jpg", "https://h/i/a_p1.jpg"],
        title="Sunset",
        ai_generated=False,
        description="Evening",
        tags=["#landscape"],
        url="https://www.pixiv.net/artworks/123",
        author_name="Artist",
        author_id="42",
        is_ugoira=False,
        create_date="2024-01-02T03:04:05+09:00",
        illust_id="123",
        profile_image_url="https://h/i/avatar.jpg",
        language="en",
        bookmark_count=0,
        like_count=0,
        comment_count=0,
        view_count=0,
        x_restrict=0,
    )


def test_pixiv_user_url() -> None:
    assert pixiv_user_url("42") == "https://www.pixiv.net/users/42"
    assert pixiv_user_url("") == "https://www.pixiv.net/"
    assert pixiv_user_url(None) == "https://www.pixiv.net/"


def test_oembed_document() -> None:
    doc = build_oembed_document(
        author_name="Artist",
        author_url="https://www.pixiv.net/users/42",
        provider_name="phixiv",
        provider_url="https://github.com/HazelTheWitch/phixiv",
    )
    assert doc["version"] == "1.0"
    assert doc["type"] == "rich"
    assert doc["author_name"] == "Artist"
    assert doc["provider_name"] == "phixiv"


def test_status_document() -> None:
    doc = build_status_document(_listing(), status_id="999", position=1)
    assert doc["id"] == "999"
    assert doc["url"] == "https://www.pixiv.net/artworks/123"
    assert doc["created_at"] == "2024-01-01T18:04:05.000Z"
    assert doc["media_attachments"][0]["url"] == "https://h/i/a_p1.jpg"
    assert doc["account"]["display_name"] == "Artist"
    assert doc["account"]["url"] == "https://www.pixiv.net/users/42"
    assert doc["account"]["avatar"] == "https://h/i/avatar.jpg"


def test_status_document_application_and_media_fields() -> None:
    doc = build_status_document(_listing(), status_id="999", position=0)
    assert doc["application"]["name"] == "Twitter Web App"
    media = doc["media_attachments"][0]
    assert media["type"] == "image"
    assert media["description"] == ""
    assert media["preview_url"] == "https://h/i/a_p0.jpg"


def test_status_document_ugoira_video_is_gifv() -> None:
    listing = replace(
        _listing(),
        is_ugoira=True,
        image_proxy_urls=["https://h/i/ugoira/123.mp4", "https://h/i/a_p0.jpg"],
    )
    media = build_status_document(listing, status_id="999", position=0)["media_attachments"][0]
    assert media["type"] == "gifv"
    assert media["url"] == "https://h/i/ugoira/123.mp4"
    assert media["preview_url"] == "https://h/i/a_p0.jpg"
