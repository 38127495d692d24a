"""Parser interfaces and the shared line-parsing loop."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from ..error_policy import FAIL_ON_ERROR
from ..errors import RecordParseError
from ..models import ParsedRecord
from ..stream import CharStream

logger = logging.getLogger(__name__)

STACK_TRACE_FIELD = "stack_trace"
ORIGINAL_LINE_FIELD = "original_line"

# Parsed line kept for the next parse() call: (line, offset, truncated, fields).
_Pending = tuple[str, int, bool, dict[str, Any]]


@runtime_checkable
class LogParser(Protocol):
    """Parser interface: yields one record per parse() call, None at end of input."""

    @property
    def offset(self) -> int:
        """Absolute offset of the next unconsumed entry."""
        ...

    def parse(self) -> ParsedRecord | None:
        """Return the next record, or None once the stream is exhausted."""
        ...


class LogLineParser(ABC):
    """Line-oriented parser bound to one stream.

    Subclasses only decide whether a single line matches. This class owns the
    read loop: truncation, the on-parse-error budget, stack-trace absorption and
    offset tracking.

    ``max_stack_trace_lines`` is -1 (unmatched lines raise), 0 (unmatched lines
    are dropped) or N > 0 (up to N unmatched lines following an entry are kept as
    its stack trace).
    """

    def __init__(
        self,
        stream: CharStream,
        source_id: str,
        start_offset: int = 0,
        *,
        max_object_len: int = -1,
        retain_original_text: bool = False,
        max_stack_trace_lines: int = FAIL_ON_ERROR,
        name: str = "log",
    ):
        self.stream = stream
        self.source_id = source_id
        self.start_offset = start_offset
        self.max_object_len = max_object_len
        self.retain_original_text = retain_original_text
        self.max_stack_trace_lines = max_stack_trace_lines
        self.name = name
        self._pending: _Pending | None = None

    @abstractmethod
    def parse_line(self, line: str) -> dict[str, Any] | None:
        """Return the fields of a matching line, or None."""

    @property
    def offset(self) -> int:
        if self._pending is not None:
            return self._pending[1]
        return self.start_offset + self.stream.pos

    def _read(self) -> tuple[str, int, bool] | None:
        """Read one line; return (line, offset, truncated) or None at end."""
        offset = self.start_offset + self.stream.pos
        raw = self.stream.read_line()
        if not raw:
            return None
        line = raw.rstrip("\r\n")
        if 0 <= self.max_object_len < len(line):
            return line[: self.max_object_len], offset, True
        return line, offset, False

    def _next_entry(self) -> _Pending | None:
        """Return the next matching line, applying the error budget to the rest."""
        while True:
            if self._pending is not None:
                entry, self._pending = self._pending, None
                return entry

            read = self._read()
            if read is None:
                return None
            line, offset, truncated = read
            fields = self.parse_line(line)
            if fields is not None:
                return line, offset, truncated, fields

            if self.max_stack_trace_lines == FAIL_ON_ERROR:
                raise RecordParseError(
                    self.source_id, offset, line, f"line does not match the {self.name} pattern"
                )
            logger.debug("Skipping unmatched line at offset %d in %s", offset, self.source_id)

    def parse(self) -> ParsedRecord | None:
        entry = self._next_entry()
        if entry is None:
            return None
        line, offset, truncated, fields = entry

        trace: list[str] = []
        dropped = 0
        if self.max_stack_trace_lines > 0:
            while (read := self._read()) is not None:
                next_line, next_offset, next_truncated = read
                next_fields = self.parse_line(next_line)
                if next_fields is not None:
                    self._pending = (next_line, next_offset, next_truncated, next_fields)
                    break
                if len(trace) < self.max_stack_trace_lines:
                    trace.append(next_line)
                    truncated = truncated or next_truncated
                else:
                    dropped += 1
            if dropped:
                logger.debug(
                    "Trimmed %d stack trace lines from entry at offset %d in %s",
                    dropped,
                    offset,
                    self.source_id,
                )

        out = dict(fields)
        if trace:
            out[STACK_TRACE_FIELD] = "\n".join(trace)
        if self.retain_original_text:
            out[ORIGINAL_LINE_FIELD] = "\n".join([line, *trace])
        return ParsedRecord(
            record_id=f"{self.source_id}::{offset}",
            offset=offset,
            fields=out,
            truncated=truncated,
        )

    def __iter__(self):
        while (record := self.parse()) is not None:
            yield record
