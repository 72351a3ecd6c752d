from __future__ import annotations

import copy
from typing import Any, Callable

import httpx
import pytest
from fastapi import FastAPI

from phixiv.main import create_app

REGULAR_URL = "https://i.pximg.net/img-master/img/2024/01/02/03/04/05/123_p0_master1200.jpg"
ORIGINAL_URL = "https://i.pximg.net/img-original/img/2024/01/02/03/04/05/123_p0.png"
PROFILE_URL = "https://i.pximg.net/user-profile/img/2020/01/01/00/00/00/42_abc_170.jpg"

_ILLUST_PAYLOAD: dict[str, Any] = {
    "error": False,
    "message": "",
    "body": {
        "illustId": "123",
        "title": "Sunset",
        "description": 'Evening sky<br />more at <a href="/jump.php?https%3A%2F%2Fexample.com%2F" target="_blank">https://example.com/</a>',
        "tags": {
            "tags": [
                {"tag": "風景", "translation": {"en": "landscape"}},
                {"tag": "オリジナル"},
            ]
        },
        "urls": {"regular": REGULAR_URL, "original": ORIGINAL_URL},
        "userId": "42",
        "userName": "Artist",
        "illustType": 0,
        "createDate": "2024-01-02T03:04:05+09:00",
        "pageCount": 3,
        "aiType": 1,
        "bookmarkCount": 10,
        "likeCount": 5,
        "commentCount": 1,
        "viewCount": 100,
        "xRestrict": 0,
        "userIllusts": {"123": None, "99": {"profileImageUrl": PROFILE_URL}},
        "extraData": {"meta": {"canonical": "https://www.pixiv.net/artworks/123"}},
    },
}


@pytest.fixture
def illust_payload() -> dict[str, Any]:
    return copy.deepcopy(_ILLUST_PAYLOAD)


@pytest.fixture
def make_app(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FastAPI]:
    def _make(handler: Callable[[httpx.Request], httpx.Response] | None = None, **env: str) -> FastAPI:
        monkeypatch.setenv("APP_ENV", "dev")
        monkeypatch.delenv("BOT_FILTERING", raising=False)
        monkeypatch.delenv("THUMBNAIL_TYPE", raising=False)
        monkeypatch.delenv("UGOIRA_ENABLED", raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        app = create_app()
        if handler is not None:
            app.state.httpx_transport = httpx.MockTransport(handler)
        return app

    return _make
