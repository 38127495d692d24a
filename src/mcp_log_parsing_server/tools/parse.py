"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mcp_log_parsing_server.core.config import RETAIN_ORIGINAL_TEXT_KEY
from mcp_log_parsing_server.core.errors import LogParsingError
from mcp_log_parsing_server.core.factory import LogParserFactory
from mcp_log_parsing_server.core.formats import (
    ORIGINAL_LINE_FIELD,
    translate_apache_layout,
    translate_log4j_layout,
)
from mcp_log_parsing_server.core.log_service import iter_records
from mcp_log_parsing_server.core.models import LogMode, ParsedRecord

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000
ALL_MODES = [m.value for m in LogMode]

TRANSLATORS = {
    "apache": translate_apache_layout,
    "log4j": translate_log4j_layout,
}


def _build_factory(
    mode: str, config: Mapping[str, Any] | None, include_raw: bool
) -> LogParserFactory:
    """Validate tool inputs into a parser factory."""
    name = mode.strip().upper().replace("-", "_")
    if name not in ALL_MODES:
        valid = ", ".join(ALL_MODES)
        raise ValueError(
            f"Unknown mode '{mode}'. Valid values: {valid}. "
            "Tip: mode is case-insensitive (e.g., 'log4j', 'GROK')."
        )
    configs = dict(config or {})
    if include_raw:
        configs[RETAIN_ORIGINAL_TEXT_KEY] = True
    try:
        return LogParserFactory(name, configs)
    except LogParsingError as e:
        raise ValueError(str(e)) from e


def _record_to_dict(record: ParsedRecord, *, include_raw: bool) -> dict[str, Any]:
    """Convert a ParsedRecord into a JSON-serializable dict."""
    fields = dict(record.fields)
    raw = fields.pop(ORIGINAL_LINE_FIELD, None)
    d: dict[str, Any] = {
        "record_id": record.record_id,
        "offset": record.offset,
        "fields": fields,
    }
    if record.truncated:
        d["truncated"] = True
    if include_raw and raw is not None:
        d["raw"] = raw
    return d


async def parse_logs_impl(
    *,
    log_path: str,
    mode: str,
    config: Mapping[str, Any] | None = None,
    start_offset: int = 0,
    limit: int | None = None,
    include_raw: bool = False,
) -> dict[str, Any]:
    """Implementation for the `parse_logs` MCP tool.

    Notes
    -----
    - ``next_offset`` is the offset of the first record not returned, or None
      when the file was read to the end. Pass it back as ``start_offset`` to
      continue.
    - Parse failures (ERROR policy) and bad configuration surface as ValueError.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    factory = _build_factory(mode, config, include_raw)

    records: list[ParsedRecord] = []
    next_offset: int | None = None
    try:
        async for record in iter_records(log_path, factory=factory, start_offset=start_offset):
            # One record past the limit tells us where to resume.
            if len(records) == limit:
                next_offset = record.offset
                break
            records.append(record)
    except LogParsingError as e:
        raise ValueError(str(e)) from e

    return {
        "count": len(records),
        "records": [_record_to_dict(r, include_raw=include_raw) for r in records],
        "next_offset": next_offset,
    }


def translate_layout_impl(*, dialect: str, layout: str) -> dict[str, Any]:
    """Implementation for the `translate_layout` MCP tool."""
    translate = TRANSLATORS.get(dialect.strip().lower())
    if translate is None:
        valid = ", ".join(sorted(TRANSLATORS))
        raise ValueError(f"Unknown dialect '{dialect}'. Valid values: {valid}.")
    try:
        expression = translate(layout)
    except LogParsingError as e:
        raise ValueError(str(e)) from e
    return {"dialect": dialect.strip().lower(), "layout": layout, "expression": expression}
