from __future__ import annotations

from prometheus_client import Counter, Histogram

PATH_MATCH_RESULTS: tuple[str, ...] = (
    "ok",
    "no_match",
    "malformed_id",
    "malformed_index",
)

EMBED_RESULTS: tuple[str, ...] = (
    "ok",
    "bot_redirect",
    "not_found",
    "upstream_error",
    "error",
)

PATH_MATCH_TOTAL = Counter(
    "phixiv_path_match_total",
    "Artwork path classification results.",
    ["result"],
)

EMBED_REQUESTS_TOTAL = Counter(
    "phixiv_embed_requests_total",
    "Total artwork embed requests by result.",
    ["result"],
)

EMBED_LATENCY_SECONDS = Histogram(
    "phixiv_embed_latency_seconds",
    "Latency for artwork embed pages (seconds).",
    buckets=(
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

PIXIV_AJAX_ERRORS_TOTAL = Counter(
    "phixiv_pixiv_ajax_errors_total",
    "Total failed pixiv ajax lookups.",
)

UPSTREAM_STREAM_ERRORS_TOTAL = Counter(
    "phixiv_upstream_stream_errors_total",
    "Total upstream stream failures (stream_url).",
)


def _init_labelsets() -> None:
    for result in PATH_MATCH_RESULTS:
        PATH_MATCH_TOTAL.labels(result=result).inc(0)
    for result in EMBED_RESULTS:
        EMBED_REQUESTS_TOTAL.labels(result=result).inc(0)
    PIXIV_AJAX_ERRORS_TOTAL.inc(0)
    UPSTREAM_STREAM_ERRORS_TOTAL.inc(0)


_init_labelsets()


def observe_path_match(result: str) -> None:
    PATH_MATCH_TOTAL.labels(result=result if result in PATH_MATCH_RESULTS else "no_match").inc()


def observe_embed_result(*, result: str, duration_s: float) -> None:
    EMBED_REQUESTS_TOTAL.labels(result=result if result in EMBED_RESULTS else "error").inc()
    EMBED_LATENCY_SECONDS.observe(max(0.0, float(duration_s)))
