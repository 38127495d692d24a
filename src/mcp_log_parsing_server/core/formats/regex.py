"""Parser for plain regular expressions with a field -> group table."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..stream import CharStream
from .base import LogLineParser


class RegexParser(LogLineParser):
    """Match each line against ``pattern`` and emit only the mapped groups.

    Single-line: callers never give it a positive stack-trace budget.
    """

    def __init__(
        self,
        pattern: re.Pattern[str],
        field_path_to_group: Mapping[str, int],
        stream: CharStream,
        source_id: str,
        start_offset: int = 0,
        **kwargs: Any,
    ):
        super().__init__(stream, source_id, start_offset, **kwargs)
        self.pattern = pattern
        self.field_path_to_group = dict(field_path_to_group)

    def parse_line(self, line: str) -> dict[str, Any] | None:
        m = self.pattern.match(line)
        if m is None:
            return None
        out: dict[str, Any] = {}
        for field_path, group in self.field_path_to_group.items():
            value = m.group(group)
            if value is not None:
                out[field_path] = value
        return out
