"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_parsing_server.core.config import default_configs
from mcp_log_parsing_server.core.errors import PatternError
from mcp_log_parsing_server.core.grok import BUILTIN_DICTIONARIES, PackageDictionaryProvider
from mcp_log_parsing_server.core.models import LogMode


def _jsonable(configs: dict[str, Any]) -> dict[str, Any]:
    """Replace enum values with their names."""
    return {k: getattr(v, "value", v) for k, v in configs.items()}


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""
    provider = PackageDictionaryProvider()

    @mcp.resource("app://log-parsing/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs and modes."""
        modes = ", ".join(m.value for m in LogMode)
        dictionaries = ", ".join(BUILTIN_DICTIONARIES)
        return (
            "Resources:\n"
            "- app://log-parsing/help\n"
            "- app://log-parsing/config/defaults\n"
            "- app://log-parsing/examples/sample-log\n"
            "- grok://dictionaries\n"
            "- grok://dictionaries/{name}\n"
            f"\nModes: {modes}\n"
            f"Built-in dictionaries: {dictionaries}\n"
        )

    @mcp.resource("app://log-parsing/config/defaults")
    def default_config() -> dict[str, Any]:
        """Return every configuration key at its default value."""
        return _jsonable(default_configs())

    @mcp.resource("app://log-parsing/examples/sample-log")
    def sample_log() -> str:
        """Return a tiny log4j sample for demos and tests."""
        return (
            "2025-12-30 08:12:01,004 INFO  Service - service started\n"
            "2025-12-30 08:12:03,310 WARN  Client - retrying request id=abc123\n"
            "2025-12-30 08:12:04,112 ERROR Client - upstream timeout\n"
            "java.net.SocketTimeoutException: Read timed out\n"
            "\tat java.net.SocketInputStream.socketRead0(Native Method)\n"
        )

    @mcp.resource("grok://dictionaries")
    def list_dictionaries() -> list[str]:
        """Return the names of the built-in pattern dictionaries."""
        return list(BUILTIN_DICTIONARIES)

    @mcp.resource("grok://dictionaries/{name}")
    def read_dictionary(name: str) -> str:
        """Return the text of a built-in pattern dictionary."""
        if name not in BUILTIN_DICTIONARIES:
            allowed = ", ".join(BUILTIN_DICTIONARIES)
            raise ValueError(f"Unknown dictionary '{name}'. Allowed: {allowed}.")
        try:
            return provider.load(name)
        except PatternError as e:
            raise ValueError(str(e)) from e
