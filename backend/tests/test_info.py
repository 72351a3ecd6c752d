from __future__ import annotations

import httpx
from fastapi.testclient import TestClient


def test_info_returns_listing(make_app, illust_payload) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        assert req.url.params.get("lang") == "en"
        return httpx.Response(200, json=illust_payload)

    app = make_app(handler)

    with TestClient(app) as client:
        resp = client.get("/api/info?id=123&language=en", headers={"X-Request-Id": "req_test"})
        assert resp.status_code == 200
        assert resp.headers["X-Request-Id"] == "req_test"
        body = resp.json()
        assert body["illust_id"] == "123"
        assert body["title"] == "Sunset"
        assert body["language"] == "en"
        assert body["tags"] == ["#landscape", "#オリジナル"]
        assert len(body["image_proxy_urls"]) == 3
        assert body["image_proxy_urls"][0].startswith("https://testserver/i/img-master/")
        assert "jump.php" not in body["description"]


def test_info_language_alias(make_app, illust_payload) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        assert req.url.params.get("lang") == "zh_tw"
        return httpx.Response(200, json=illust_payload)

    app = make_app(handler)

    with TestClient(app) as client:
        assert client.get("/api/info?id=123&language=zh-TW").status_code == 200


def test_info_rejects_bad_id(make_app) -> None:
    app = make_app()

    with TestClient(app) as client:
        for query in ("", "?id=abc", "?id=0", "?id=-5"):
            resp = client.get("/api/info" + query)
            assert resp.status_code == 400
            assert resp.json()["code"] == "BAD_REQUEST"


def test_info_rejects_unknown_language(make_app) -> None:
    app = make_app()

    with TestClient(app) as client:
        resp = client.get("/api/info?id=123&language=fr")
        assert resp.status_code == 400
        assert resp.json()["details"] == {"language": "fr"}


def test_info_trims_query_id(make_app, illust_payload) -> None:
    app = make_app(lambda req: httpx.Response(200, json=illust_payload))

    with TestClient(app) as client:
        assert client.get("/api/info?id=%20123%20").status_code == 200
