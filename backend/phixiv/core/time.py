from __future__ import annotations

from datetime import datetime, timezone


def iso_utc_ms(dt: datetime | None = None) -> str:
    dt = dt or datetime.now(timezone.utc)
    dt = dt.astimezone(timezone.utc)
    ms = dt.microsecond // 1000
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ms:03d}Z"


def parse_rfc3339(value: str) -> datetime | None:
    """Parse pixiv's ``createDate`` (``2024-01-02T03:04:05+09:00``); naive values are taken as UTC."""
    raw = (value or "").strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def rfc3339_to_iso_utc_ms(value: str) -> str | None:
    dt = parse_rfc3339(value)
    return iso_utc_ms(dt) if dt is not None else None
