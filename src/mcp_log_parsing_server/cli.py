from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from mcp_log_parsing_server.core.errors import LogParsingError
from mcp_log_parsing_server.core.factory import LogParserFactory
from mcp_log_parsing_server.core.log_service import iter_records
from mcp_log_parsing_server.core.models import LogMode


def _parse_config(s: str) -> tuple[str, Any]:
    key, sep, value = s.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError("config must look like KEY=VALUE")
    # JSON values allow mappings and escapes, e.g. {"ip": 1} or "A\nB".
    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    return key.strip(), parsed


def _parse_mode(s: str) -> LogMode:
    try:
        return LogMode(s.strip().upper().replace("-", "_"))
    except ValueError as e:
        allowed = ", ".join(m.value for m in LogMode)
        raise argparse.ArgumentTypeError(f"Invalid mode. Allowed: {allowed}") from e


async def _print_records(path: Path, factory: LogParserFactory, limit: int | None) -> int:
    count = 0
    async for record in iter_records(path, factory=factory):
        d: dict[str, Any] = {"record_id": record.record_id, "offset": record.offset}
        if record.truncated:
            d["truncated"] = True
        d.update(record.fields)
        print(json.dumps(d, ensure_ascii=False, default=str))
        count += 1
        if limit is not None and count >= limit:
            break
    return count


def main() -> None:
    p = argparse.ArgumentParser(description="Parse a log file into JSON records.")
    p.add_argument("log_path")
    p.add_argument("--mode", type=_parse_mode, required=True, help="Log format, e.g. LOG4J or GROK")
    p.add_argument(
        "--config",
        dest="configs",
        type=_parse_config,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Configuration key (repeatable), e.g. log.on.parse.error=IGNORE",
    )
    p.add_argument("--max-object-len", type=int, default=-1, help="Truncate longer lines (-1: never)")
    p.add_argument("--limit", type=int, default=None, help="Max records to print (default: no cap)")
    p.add_argument(
        "--show-pattern", action="store_true", help="Print the Grok/regex pattern and exit"
    )

    args = p.parse_args()
    path = Path(args.log_path)

    try:
        if args.limit is not None and args.limit <= 0:
            raise ValueError("limit must be > 0")
        factory = LogParserFactory(
            args.mode, dict(args.configs), max_object_len=args.max_object_len
        )
        if args.show_pattern:
            print(factory.pattern_source())
            return
        asyncio.run(_print_records(path, factory, args.limit))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except (ValueError, LogParsingError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
