"""Parser for lines described by a compiled Grok expression."""

from __future__ import annotations

from typing import Any

from ..grok import Grok
from ..stream import CharStream
from .base import LogLineParser


class GrokParser(LogLineParser):
    """Match each line against a Grok expression; fields come from its captures."""

    def __init__(
        self,
        grok: Grok,
        stream: CharStream,
        source_id: str,
        start_offset: int = 0,
        **kwargs: Any,
    ):
        super().__init__(stream, source_id, start_offset, **kwargs)
        self.grok = grok

    def parse_line(self, line: str) -> dict[str, Any] | None:
        return self.grok.match(line)
