from __future__ import annotations

from dataclasses import dataclass

_LANGUAGE_CODES: dict[str, int] = {
    "jp": 0,
    "en": 1,
    "zh": 2,
    "zh_tw": 3,
    "ko": 4,
}
_LANGUAGE_BY_CODE: dict[int, str] = {v: k for k, v in _LANGUAGE_CODES.items()}

_MAX_ILLUST_ID = 0xFFFFFFFF
_MAX_INDEX = 0xFFFF

# Anything at or below this cannot carry a language or index; treat it as a plain illust id.
PLAIN_ID_MAX = _MAX_ILLUST_ID


@dataclass(frozen=True, slots=True)
class ActivityId:
    """(language, illust id, zero-based image index) packed into one integer.

    Layout: language code in bits 48-55, illust id in bits 16-47, index in bits 0-15.
    """

    language: str
    illust_id: int
    index: int = 0

    def pack(self) -> int:
        if not 0 < int(self.illust_id) <= _MAX_ILLUST_ID:
            raise ValueError("illust_id out of range")
        if not 0 <= int(self.index) <= _MAX_INDEX:
            raise ValueError("index out of range")
        lang_code = _LANGUAGE_CODES.get(self.language, 0)
        return (lang_code << 48) | (int(self.illust_id) << 16) | int(self.index)

    @classmethod
    def unpack(cls, value: int) -> ActivityId:
        value = int(value)
        if value < 0:
            raise ValueError("activity id must be unsigned")
        lang_code = (value >> 48) & 0xFF
        return cls(
            language=_LANGUAGE_BY_CODE.get(lang_code, "jp"),
            illust_id=(value >> 16) & _MAX_ILLUST_ID,
            index=value & _MAX_INDEX,
        )
