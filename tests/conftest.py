from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from mcp_log_parsing_server.core.grok import BASE_DICTIONARIES, Grok, GrokDictionary

ACCESS_LINE = (
    '127.0.0.1 - - [10/Oct/2023:13:55:36 -0700] "GET /index.html HTTP/1.1" 200 1024'
)

LOG4J_LINES = [
    "2023-10-10 13:55:36,123 ERROR MyClass - something failed",
    "java.lang.IllegalStateException: boom",
    "\tat com.example.MyClass.run(MyClass.java:10)",
    "\tat com.example.Main.main(Main.java:3)",
    "2023-10-10 13:55:37,000 INFO  MyClass - recovered",
]


@pytest.fixture
def access_line() -> str:
    return ACCESS_LINE


@pytest.fixture
def log4j_lines() -> list[str]:
    return list(LOG4J_LINES)


@pytest.fixture
def compile_grok() -> Callable[..., Grok]:
    """Compile an expression against the bundled dictionaries."""

    def _compile(expression: str, *extra: str) -> Grok:
        dictionary = GrokDictionary()
        for name in (*BASE_DICTIONARIES, *extra):
            dictionary.add_resource(name)
        dictionary.bind()
        return dictionary.compile_expression(expression)

    return _compile


@pytest.fixture
def write_log() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return _write
