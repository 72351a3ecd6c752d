from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "***"

_SENSITIVE_KEY_PARTS = ("cookie", "phpsessid", "authorization", "token", "secret")

_TEXT_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(?i)(PHPSESSID=)([^;\s&]+)"), r"\1" + REDACTED),
    (re.compile(r"(?i)(\bcookie[\"']?\s*[:=]\s*[\"']?)([^\"'\n]+)"), r"\1" + REDACTED),
    (re.compile(r"(?i)\bBearer\s+\S+"), "Bearer " + REDACTED),
)


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in _SENSITIVE_KEY_PARTS)


def redact_text(text: str) -> str:
    for pattern, replacement in _TEXT_RULES:
        text = pattern.sub(replacement, text)
    return text


def redact_any(value: Any) -> Any:
    """Mask pixiv session secrets in strings, bytes and nested containers."""
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, bytes):
        return redact_text(value.decode("utf-8", errors="replace")).encode("utf-8")
    if isinstance(value, Mapping):
        return {
            k: REDACTED if isinstance(k, str) and is_sensitive_key(k) else redact_any(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [redact_any(v) for v in value]
    if isinstance(value, tuple):
        return tuple(redact_any(v) for v in value)
    return value
