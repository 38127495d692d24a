"""Compiled Grok expression."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

COERCIONS = ("int", "float")


@dataclass(frozen=True, slots=True)
class Capture:
    """Maps a generated regex group to an output field."""

    group: str
    field: str
    type: str | None = None  # "int" | "float" | None (keep as string)


def _coerce(value: str, type_: str | None) -> Any:
    """Convert a captured string; values that do not convert stay strings."""
    try:
        if type_ == "int":
            return int(value)
        if type_ == "float":
            return float(value)
    except ValueError:
        return value
    return value


@dataclass(frozen=True, slots=True)
class Grok:
    """A fully expanded named-pattern expression ready for matching.

    Immutable and safe to share between parsers and threads.
    """

    expression: str
    regex: re.Pattern[str]
    captures: tuple[Capture, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        """Output field names in capture order, without duplicates."""
        return tuple(dict.fromkeys(c.field for c in self.captures))

    def match(self, text: str) -> dict[str, Any] | None:
        """Match ``text`` from its start; return captured fields or None."""
        m = self.regex.match(text)
        if m is None:
            return None

        out: dict[str, Any] = {}
        for cap in self.captures:
            value = m.group(cap.group)
            if value is None:
                continue
            # Repeated field names: first non-empty capture wins.
            if out.get(cap.field) not in (None, ""):
                continue
            out[cap.field] = _coerce(value, cap.type)
        return out
