from __future__ import annotations

import pytest

from phixiv.core.artwork_path import ArtworkRef
from phixiv.core.bot_filter import is_bot_user_agent, pixiv_artwork_url, pixiv_passthrough_url


@pytest.mark.parametrize(
    "ua",
    [
        "Mozilla/5.0 (compatible; Discordbot/2.0; +https://discordapp.com)",
        "TelegramBot (like TwitterBot)",
        "Mozilla/5.0 (compatible; Mastodon/4.2.0; +https://mastodon.social/)",
        "facebookexternalhit/1.1",
        "Slackbot-LinkExpanding 1.0 (+https://api.slack.com/robots)",
        "",
        None,
    ],
)
def test_bots_are_detected(ua: str | None) -> None:
    assert is_bot_user_agent(ua) is True


@pytest.mark.parametrize(
    "ua",
    [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0 Safari/537.36",
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Version/17.0 Mobile Safari/604.1",
    ],
)
def test_browsers_are_not_bots(ua: str) -> None:
    assert is_bot_user_agent(ua) is False


def test_pixiv_artwork_url() -> None:
    assert pixiv_artwork_url(ArtworkRef(illust_id=1)) == "https://www.pixiv.net/artworks/1"
    assert pixiv_artwork_url(ArtworkRef(illust_id=1, language="en", index=2)) == "https://www.pixiv.net/en/artworks/1#2"


def test_pixiv_passthrough_url() -> None:
    assert pixiv_passthrough_url("/users/42", "p=2") == "https://www.pixiv.net/users/42?p=2"
    assert pixiv_passthrough_url("/", "") == "https://www.pixiv.net/"
    assert pixiv_passthrough_url("ranking.php") == "https://www.pixiv.net/ranking.php"
