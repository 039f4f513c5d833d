"""PipeWire object identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass

_U32_MAX = 0xFFFF_FFFF
_UNSIGNED = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True, order=True)
class ObjectId:
    """A PipeWire object ID, an unsigned 32-bit integer."""

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"object ID must be an int, not {type(self.value).__name__}")
        if not 0 <= self.value <= _U32_MAX:
            raise ValueError(f"object ID out of range: {self.value}")

    @classmethod
    def parse(cls, text: str) -> ObjectId:
        """Parse a decimal object ID, raising ValueError if it is invalid."""
        if not _UNSIGNED.fullmatch(text):
            raise ValueError(f"invalid object ID: {text!r}")
        return cls(int(text))

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)