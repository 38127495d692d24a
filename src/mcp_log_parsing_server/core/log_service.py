"""Log loading and record iteration.

This module is the main integration point that reads log files and turns them
into parsed records through a LogParserFactory.
"""

from __future__ import annotations

import gzip
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiofiles
from aiofiles.threadpool import wrap

from .factory import LogParserFactory
from .formats import LogParser
from .models import LogMode, ParsedRecord
from .stream import CharStream


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


async def read_text(
    log_path: str | Path, *, encoding: str = "utf-8", decode_errors: str = "replace"
) -> str:
    """Return the decoded contents of a plain or gzip log file."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        return await f.read()


async def iter_records(
    log_path: str | Path,
    *,
    mode: LogMode | str | None = None,
    configs: Mapping[str, Any] | None = None,
    factory: LogParserFactory | None = None,
    start_offset: int = 0,
    max_object_len: int = -1,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[ParsedRecord]:
    """Yield parsed records from a log file.

    Either pass a prebuilt ``factory`` (shared across files) or a ``mode`` plus
    optional ``configs``. ``start_offset`` resumes at a character offset returned
    earlier by a parser; record offsets stay absolute.
    """
    if factory is None:
        if mode is None:
            raise ValueError("Either mode or factory is required")
        factory = LogParserFactory(mode, configs, max_object_len=max_object_len)
    if start_offset < 0:
        raise ValueError("start_offset must be >= 0")

    path = Path(log_path)
    text = await read_text(path, encoding=encoding, decode_errors=decode_errors)

    stream = CharStream(text[start_offset:])
    parser: LogParser = factory.build_parser(str(path), stream, start_offset)
    try:
        while (record := parser.parse()) is not None:
            yield record
    finally:
        stream.close()


async def get_records(
    log_path: str | Path,
    **iter_kwargs,
) -> list[ParsedRecord]:
    """Collect iter_records into a list."""
    return [record async for record in iter_records(log_path, **iter_kwargs)]
