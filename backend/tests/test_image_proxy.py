from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

IMAGE_PATH = "/img-master/img/2024/01/02/03/04/05/123_p0_master1200.jpg"


def test_image_proxy_streams_bytes(make_app) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        assert str(req.url) == "https://i.pximg.net" + IMAGE_PATH
        assert req.headers.get("Referer") == "https://www.pixiv.net/"
        return httpx.Response(200, headers={"Content-Type": "image/jpeg"}, content=b"img-bytes")

    app = make_app(handler)

    with TestClient(app) as client:
        resp = client.get("/i" + IMAGE_PATH, headers={"X-Request-Id": "req_test"})
        assert resp.status_code == 200
        assert resp.content == b"img-bytes"
        assert resp.headers["content-type"] == "image/jpeg"
        assert resp.headers["Cache-Control"] == "public, max-age=86400"
        assert resp.headers["X-Request-Id"] == "req_test"


def test_image_proxy_range_passthrough_returns_206(make_app) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        assert req.headers.get("Range") == "bytes=0-2"
        return httpx.Response(
            206,
            headers={
                "Content-Type": "image/jpeg",
                "Content-Length": "3",
                "Accept-Ranges": "bytes",
                "Content-Range": "bytes 0-2/6",
            },
            content=b"abc",
        )

    app = make_app(handler)

    with TestClient(app) as client:
        resp = client.get("/i" + IMAGE_PATH, headers={"Range": "bytes=0-2"})
        assert resp.status_code == 206
        assert resp.content == b"abc"
        assert resp.headers["Accept-Ranges"] == "bytes"
        assert resp.headers["Content-Range"] == "bytes 0-2/6"


def test_image_proxy_uses_configured_base(make_app) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        assert str(req.url) == "https://pximg.example.test" + IMAGE_PATH
        return httpx.Response(200, headers={"Content-Type": "image/jpeg"}, content=b"x")

    app = make_app(handler, PXIMG_BASE="https://pximg.example.test")

    with TestClient(app) as client:
        assert client.get("/i" + IMAGE_PATH).status_code == 200


def test_image_proxy_upstream_404(make_app) -> None:
    app = make_app(lambda req: httpx.Response(404, content=b"missing"))

    with TestClient(app) as client:
        resp = client.get("/i" + IMAGE_PATH)
        assert resp.status_code == 502
        assert resp.json()["code"] == "UPSTREAM_404"


def test_image_proxy_rejects_dot_segments(make_app) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        raise AssertionError("upstream must not be called")

    app = make_app(handler)

    with TestClient(app) as client:
        resp = client.get("/i/img-master/%2E%2E/secret.jpg")
        assert resp.status_code == 400
        assert resp.json()["code"] == "BAD_REQUEST"


def test_image_host_serves_proxy(make_app) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        assert req.url.path == IMAGE_PATH
        return httpx.Response(200, headers={"Content-Type": "image/jpeg"}, content=b"from-i-host")

    app = make_app(handler)

    with TestClient(app, base_url="http://i.phixiv.test") as client:
        resp = client.get(IMAGE_PATH)
        assert resp.status_code == 200
        assert resp.content == b"from-i-host"


def test_image_host_single_segment_is_not_an_artwork(make_app) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        raise AssertionError("upstream must not be called")

    app = make_app(handler)

    with TestClient(app, base_url="http://i.phixiv.test") as client:
        resp = client.get("/123", follow_redirects=False)
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"


def test_image_host_ugoira_video_is_proxied(make_app) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        assert req.url.path == "/ugoira/123.mp4"
        return httpx.Response(200, headers={"Content-Type": "video/mp4"}, content=b"mp4")

    app = make_app(handler)

    with TestClient(app, base_url="http://i.phixiv.test") as client:
        resp = client.get("/ugoira/123.mp4")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "video/mp4"
