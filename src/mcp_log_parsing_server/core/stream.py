"""Character stream with a tracked read position."""

from __future__ import annotations

import io
from typing import TextIO


class CharStream:
    """Line reader over a text stream that counts consumed characters.

    ``pos`` is relative to where the stream was opened; parsers add their own
    starting offset to turn it into a position within the whole input.
    """

    __slots__ = ("_source", "_pos")

    def __init__(self, source: str | TextIO):
        self._source: TextIO = io.StringIO(source) if isinstance(source, str) else source
        self._pos = 0

    @classmethod
    def at(cls, text: str, pos: int) -> CharStream:
        """Return a stream over ``text`` that has already consumed ``pos`` chars."""
        stream = cls(text)
        if pos:
            stream._source.read(pos)
            stream._pos = pos
        return stream

    @property
    def pos(self) -> int:
        return self._pos

    def read_line(self) -> str:
        """Return the next line including its terminator, or '' at end of stream."""
        line = self._source.readline()
        self._pos += len(line)
        return line

    def close(self) -> None:
        self._source.close()
