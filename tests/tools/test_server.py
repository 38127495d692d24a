from __future__ import annotations

import pytest

from mcp_log_parsing_server.server import log_server


@pytest.mark.asyncio
async def test_tools_are_registered() -> None:
    tools = await log_server.mcp.list_tools()
    assert {t.name for t in tools} >= {"parse_logs", "translate_layout"}


@pytest.mark.asyncio
async def test_resources_are_registered() -> None:
    uris = {str(r.uri) for r in await log_server.mcp.list_resources()}
    assert any(u.endswith("config/defaults") for u in uris)
    assert any(u.startswith("grok://dictionaries") for u in uris)

    templates = await log_server.mcp.list_resource_templates()
    assert any("{name}" in t.uriTemplate for t in templates)


def test_translate_layout_tool_is_plain_function() -> None:
    out = log_server.translate_layout("log4j", "%m")
    assert out["expression"] == "%{LOG4J_MESSAGE:message}"
