"""Caption cleanup for pixiv artwork descriptions.

pixiv captions are a small HTML subset: ``<a>``, ``<br>``, ``<strong>``,
``<s>``, ``<i>``, ``<span style=...>``. Text that merely looks like a tag
(``a<NOT A TAG>``) must survive, so this peels matched open/close pairs
instead of running a full HTML parser.
"""
from __future__ import annotations

import re
from urllib.parse import unquote

_JUMP_LINK_RE = re.compile(r'href="/jump\.php\?(.*?)"')

_TAG_PAIR_RE = re.compile(
    r"(?P<before>.*?)<(?P<tag>[^\s>]+)(?:\s*[^>]+)?>(?P<inner>.*?)</(?P=tag)\s*>(?P<after>.*)",
    re.DOTALL,
)

_BR_RE = re.compile(r"<br\s*/?>")


def fix_jump_links(description: str) -> str:
    """Replace pixiv's ``/jump.php?<url>`` redirector links with their target."""
    return _JUMP_LINK_RE.sub(lambda m: f'href="{unquote(m.group(1))}"', description or "")


def extract_inner_text(html: str) -> str:
    segments = [html or ""]
    parts: list[str] = []

    while segments:
        segment = segments.pop()
        m = _TAG_PAIR_RE.fullmatch(segment)
        if m is None:
            parts.append(segment)
            continue

        segments.append(m.group("after"))
        inner = m.group("inner")
        if m.group("tag") == "a":
            # keep link text from gluing onto its neighbours
            inner = f" {inner} "
        segments.append(inner)
        parts.append(m.group("before"))

    return "\n".join(line.strip() for line in _BR_RE.split("".join(parts)))
