"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (parse a log file, translate a layout)
- Resources: addressable data blobs (default config, pattern dictionaries)

Run locally (stdio):
    python -m mcp_log_parsing_server.server.log_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_parsing_server.resources.registry import register_resources
from mcp_log_parsing_server.tools.parse import parse_logs_impl, translate_layout_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("LOG_PARSING_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("log-parsing", json_response=True)

register_resources(mcp)


@mcp.tool()
async def parse_logs(
    log_path: str,
    mode: str,
    config: dict[str, Any] | None = None,
    start_offset: int = 0,
    limit: int | None = None,
    include_raw: bool = False,
) -> dict[str, Any]:
    """Parse a log file into structured records.

    Parameters
    ----------
    log_path:
        Path to a local log file. Supports plain text and .gz.
    mode:
        One of COMMON_LOG_FORMAT, COMBINED_LOG_FORMAT, APACHE_CUSTOM_LOG_FORMAT,
        APACHE_ERROR_LOG_FORMAT, REGEX, GROK, LOG4J. Case-insensitive.
    config:
        Flat configuration keys, e.g.
          - {"log.grok.pattern": "%{IP:client} %{WORD:verb}"}
          - {"log4j.custom.log.format": "%d [%t] %-5p %c - %m"}
          - {"log.on.parse.error": "INCLUDE_AS_STACK_TRACE"}
        See app://log-parsing/config/defaults for every key.
    start_offset:
        Character offset to resume from (the next_offset of an earlier call).
    limit:
        Maximum number of records returned (hard-capped in the implementation).
    include_raw:
        Whether to include the original entry text in each record.

    Returns
    -------
    dict:
        {"count": int, "records": list[dict], "next_offset": int | None}
    """
    return await parse_logs_impl(
        log_path=log_path,
        mode=mode,
        config=config,
        start_offset=start_offset,
        limit=limit,
        include_raw=include_raw,
    )


@mcp.tool()
def translate_layout(dialect: str, layout: str) -> dict[str, Any]:
    """Translate an Apache ("apache") or log4j ("log4j") layout into a Grok expression."""
    return translate_layout_impl(dialect=dialect, layout=layout)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
