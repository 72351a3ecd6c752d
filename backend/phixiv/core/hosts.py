from __future__ import annotations

IMAGE_HOST_PREFIX = "i."
OEMBED_HOST_PREFIX = "e."
CAPTION_FREE_HOST_PREFIX = "c."


def _normalize_host(host: str | None) -> str:
    return (host or "").strip().lower()


def is_image_host(host: str | None) -> bool:
    return _normalize_host(host).startswith(IMAGE_HOST_PREFIX)


def is_caption_free_host(host: str | None) -> bool:
    return _normalize_host(host).startswith(CAPTION_FREE_HOST_PREFIX)


def rewrite_path_for_host(host: str | None, path: str) -> str:
    """Subdomain shortcuts: ``i.`` serves images, ``e.`` serves the oEmbed document."""
    if is_image_host(host):
        return "/i" + (path if path.startswith("/") else "/" + path)
    if _normalize_host(host).startswith(OEMBED_HOST_PREFIX):
        return "/e"
    return path
