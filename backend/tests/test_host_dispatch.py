from __future__ import annotations

from phixiv.core.hosts import is_caption_free_host, is_image_host, rewrite_path_for_host


def test_image_host_prefixes_path() -> None:
    assert rewrite_path_for_host("i.phixiv.net", "/img-master/a.jpg") == "/i/img-master/a.jpg"
    assert rewrite_path_for_host("I.PHIXIV.NET", "a.jpg") == "/i/a.jpg"


def test_oembed_host_serves_e() -> None:
    assert rewrite_path_for_host("e.phixiv.net", "/anything/here") == "/e"


def test_other_hosts_untouched() -> None:
    assert rewrite_path_for_host("phixiv.net", "/artworks/1") == "/artworks/1"
    assert rewrite_path_for_host("c.phixiv.net", "/artworks/1") == "/artworks/1"
    assert rewrite_path_for_host("", "/artworks/1") == "/artworks/1"


def test_host_predicates() -> None:
    assert is_image_host("i.phixiv.net:3000") is True
    assert is_image_host("phixiv.net") is False
    assert is_image_host(None) is False
    assert is_caption_free_host(" C.phixiv.net") is True
    assert is_caption_free_host("i.phixiv.net") is False
