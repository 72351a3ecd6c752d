from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any
from urllib.parse import urlparse

from phixiv.pixiv.ajax import DEFAULT_LANGUAGE, PixivIllust
from phixiv.pixiv.caption import fix_jump_links

UGOIRA_VIDEO_SUFFIX = ".mp4"


@dataclass(frozen=True, slots=True)
class ArtworkListing:
    """Everything needed to render one artwork, keyed by (language, illust_id)."""

    image_proxy_urls: list[str]
    title: str
    ai_generated: bool
    description: str
    tags: list[str]
    url: str
    author_name: str
    author_id: str
    is_ugoira: bool
    create_date: str
    illust_id: str
    profile_image_url: str | None
    language: str
    bookmark_count: int
    like_count: int
    comment_count: int
    view_count: int
    x_restrict: int
    width: int = 0
    height: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def image_position(self, index: int | None) -> int:
        """Zero-based position for a 1-based ``index``, clamped to the last page."""
        if self.is_ugoira or not self.image_proxy_urls:
            return 0
        wanted = index if index is not None and index >= 1 else 1
        return max(0, min(wanted, len(self.image_proxy_urls)) - 1)

    @property
    def video_url(self) -> str | None:
        if self.is_ugoira and self.image_proxy_urls and self.image_proxy_urls[0].endswith(UGOIRA_VIDEO_SUFFIX):
            return self.image_proxy_urls[0]
        return None

    def still_image_url(self, position: int) -> str:
        """Image at ``position``; a ugoira video is replaced by its first frame."""
        urls = self.image_proxy_urls
        if self.video_url is not None:
            return urls[1] if len(urls) > 1 else ""
        return urls[position] if urls else ""


def proxy_url(host: str, upstream_url: str) -> str:
    return f"https://{host}/i{urlparse(upstream_url).path}"


def _page_paths(base_path: str, *, page_count: int, thumbnail_type: str) -> list[str]:
    paths: list[str] = []
    for page in range(max(1, page_count)):
        path = base_path if page == 0 else base_path.replace("_p0_", f"_p{page}_")
        if thumbnail_type:
            path = path.replace("img-master", thumbnail_type)
        paths.append(path)
    return paths


def build_listing(
    illust: PixivIllust,
    *,
    language: str | None,
    host: str,
    thumbnail_type: str = "",
    ugoira_enabled: bool = False,
) -> ArtworkListing:
    language = language or DEFAULT_LANGUAGE

    image_url = illust.regular_url or illust.original_url or ""
    base_path = urlparse(image_url).path
    if illust.is_ugoira and ugoira_enabled:
        # The converted video first, then the first frame as a still.
        image_proxy_urls = [
            f"https://{host}/i/ugoira/{illust.illust_id}{UGOIRA_VIDEO_SUFFIX}",
            f"https://{host}/i{base_path}",
        ]
    else:
        image_proxy_urls = [
            f"https://{host}/i{path}"
            for path in _page_paths(base_path, page_count=illust.page_count, thumbnail_type=thumbnail_type)
        ]

    profile_image_url = proxy_url(host, illust.profile_image_url) if illust.profile_image_url else None

    return ArtworkListing(
        image_proxy_urls=image_proxy_urls,
        title=illust.title,
        ai_generated=illust.ai_generated,
        description=fix_jump_links(illust.description),
        tags=[f"#{tag.display(language)}" for tag in illust.tags],
        url=illust.canonical_url,
        author_name=illust.author_name,
        author_id=illust.author_id,
        is_ugoira=illust.is_ugoira,
        create_date=illust.create_date,
        illust_id=illust.illust_id,
        profile_image_url=profile_image_url,
        language=language,
        bookmark_count=illust.bookmark_count,
        like_count=illust.like_count,
        comment_count=illust.comment_count,
        view_count=illust.view_count,
        x_restrict=illust.x_restrict,
        width=illust.width,
        height=illust.height,
    )
