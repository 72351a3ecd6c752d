from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import parse_qs

ARTWORKS_ANCHOR = "artworks"
LEGACY_PATH = "member_illust.php"
LEGACY_QUERY_KEY = "illust_id"

SUPPORTED_LANGUAGES: tuple[str, ...] = ("jp", "en", "zh", "zh_tw", "ko")

_LANGUAGE_ALIASES: dict[str, str] = {
    "ja": "jp",
    "jp": "jp",
    "en": "en",
    "zh": "zh",
    "zh-cn": "zh",
    "zh_cn": "zh",
    "zh-tw": "zh_tw",
    "zh_tw": "zh_tw",
    "ko": "ko",
}


class RouteShape(str, Enum):
    LEGACY_QUERY = "legacy_query"
    DIRECT_ID = "direct_id"
    ARTWORKS = "artworks"


class PathMatchError(str, Enum):
    NO_MATCH = "no_match"
    MALFORMED_ID = "malformed_id"
    MALFORMED_INDEX = "malformed_index"


@dataclass(frozen=True, slots=True)
class ArtworkRef:
    illust_id: int
    language: str | None = None
    index: int | None = None


@dataclass(frozen=True, slots=True)
class PathMatch:
    ref: ArtworkRef | None
    shape: RouteShape | None = None
    error: PathMatchError | None = None

    @property
    def ok(self) -> bool:
        return self.ref is not None


def _split_segments(path: str) -> list[str]:
    return [seg for seg in (path or "").strip("/").split("/") if seg]


def parse_unsigned(raw: str | None) -> int | None:
    """ASCII digits only; surrounding whitespace makes the value invalid."""
    value = raw or ""
    if not value or not value.isascii() or not value.isdigit():
        return None
    return int(value)


@dataclass(frozen=True, slots=True)
class RoutePattern:
    """A route template like ``/:language/artworks/:id/:index``.

    Segments starting with ``:`` are placeholders, everything else must match
    literally.
    """

    template: str
    shape: RouteShape
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, template: str, *, shape: RouteShape) -> RoutePattern:
        return cls(template=template, shape=shape, segments=tuple(_split_segments(template)))

    def bind(self, segments: list[str]) -> dict[str, str] | None:
        if len(segments) != len(self.segments):
            return None
        bound: dict[str, str] = {}
        for want, got in zip(self.segments, segments):
            if want.startswith(":"):
                bound[want[1:]] = got
            elif want != got:
                return None
        return bound


# Most specific first.
ROUTE_PATTERNS: tuple[RoutePattern, ...] = (
    RoutePattern.parse("/:language/artworks/:id/:index", shape=RouteShape.ARTWORKS),
    RoutePattern.parse("/:language/artworks/:id", shape=RouteShape.ARTWORKS),
    RoutePattern.parse("/artworks/:id/:index", shape=RouteShape.ARTWORKS),
    RoutePattern.parse("/artworks/:id", shape=RouteShape.ARTWORKS),
    RoutePattern.parse("/i/:id", shape=RouteShape.DIRECT_ID),
)

NO_MATCH = PathMatch(ref=None, error=PathMatchError.NO_MATCH)


def normalize_language(raw: str | None) -> str | None:
    value = (raw or "").strip().lower()
    if not value:
        return None
    return _LANGUAGE_ALIASES.get(value)


def _match_legacy_query(path_segments: list[str], query_string: str) -> PathMatch | None:
    params = parse_qs(query_string or "", keep_blank_values=True)
    values = params.get(LEGACY_QUERY_KEY)
    is_legacy_path = path_segments == [LEGACY_PATH]

    if not values:
        return NO_MATCH if is_legacy_path else None

    illust_id = parse_unsigned(values[0])
    if illust_id is None or illust_id <= 0:
        if is_legacy_path:
            return PathMatch(ref=None, shape=RouteShape.LEGACY_QUERY, error=PathMatchError.MALFORMED_ID)
        return None

    return PathMatch(ref=ArtworkRef(illust_id=illust_id), shape=RouteShape.LEGACY_QUERY)


def _bind_pattern(pattern: RoutePattern, segments: list[str]) -> PathMatch | None:
    bound = pattern.bind(segments)
    if bound is None:
        return None

    language_raw = bound.get("language")
    if language_raw is not None and language_raw.isdigit():
        # An id in the language slot; let a shorter pattern take it.
        return None

    illust_id = parse_unsigned(bound.get("id"))
    if illust_id is None or illust_id <= 0:
        return PathMatch(ref=None, shape=pattern.shape, error=PathMatchError.MALFORMED_ID)

    error: PathMatchError | None = None
    index: int | None = None
    if "index" in bound:
        index = parse_unsigned(bound["index"])
        if index is None or index < 1:
            index = None
            error = PathMatchError.MALFORMED_INDEX

    ref = ArtworkRef(illust_id=illust_id, language=normalize_language(language_raw), index=index)
    return PathMatch(ref=ref, shape=pattern.shape, error=error)


def match_artwork_path(path: str, query_string: str = "") -> PathMatch:
    """Classify a request path + raw query string into an artwork reference.

    The legacy ``illust_id`` query parameter wins over any path form. For the
    segmented forms the literal ``artworks`` segment fixes where the language
    and the id sit. A bad index is dropped and reported through
    ``PathMatchError.MALFORMED_INDEX``; a bad id never produces a reference.
    """
    segments = _split_segments(path)

    legacy = _match_legacy_query(segments, query_string)
    if legacy is not None:
        return legacy

    malformed: PathMatch | None = None
    for pattern in ROUTE_PATTERNS:
        result = _bind_pattern(pattern, segments)
        if result is None:
            continue
        if result.ok:
            return result
        malformed = malformed or result

    return malformed or NO_MATCH
