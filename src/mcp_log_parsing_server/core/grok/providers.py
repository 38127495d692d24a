"""Sources of named-pattern dictionaries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib.resources import files
from typing import Protocol

from ..errors import PatternError

GROK_PATTERNS = "grok-patterns"
JAVA_LOG_PATTERNS = "java-log"
APACHE_ERROR_LOG_PATTERNS = "apache-error-log"
LOG4J_PATTERNS = "log4j"

# Loaded for every compiled expression.
BASE_DICTIONARIES: tuple[str, ...] = (GROK_PATTERNS, JAVA_LOG_PATTERNS)

BUILTIN_DICTIONARIES: tuple[str, ...] = (
    GROK_PATTERNS,
    JAVA_LOG_PATTERNS,
    APACHE_ERROR_LOG_PATTERNS,
    LOG4J_PATTERNS,
)


class DictionaryProvider(Protocol):
    """Loads a named-pattern dictionary's text by name."""

    def load(self, name: str) -> str:
        """Return the dictionary text for ``name``."""
        ...


@dataclass(frozen=True, slots=True)
class PackageDictionaryProvider:
    """Serve the dictionaries bundled under ``patterns/``."""

    package: str = __package__ or "mcp_log_parsing_server.core.grok"
    directory: str = "patterns"

    def load(self, name: str) -> str:
        """Read ``patterns/<name>.txt`` from the package."""
        resource = files(self.package) / self.directory / f"{name}.txt"
        if not resource.is_file():
            raise PatternError(f"Pattern dictionary '{name}' not found")
        return resource.read_text(encoding="utf-8")


@dataclass(frozen=True, slots=True)
class StaticDictionaryProvider:
    """Serve dictionaries from an in-memory name -> text mapping."""

    dictionaries: Mapping[str, str] = field(default_factory=dict)

    def load(self, name: str) -> str:
        try:
            return self.dictionaries[name]
        except KeyError:
            raise PatternError(f"Pattern dictionary '{name}' not found") from None
