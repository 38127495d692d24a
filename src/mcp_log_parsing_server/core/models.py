"""Core data models for log parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LogMode(str, Enum):
    """Supported log formats; selected once per parser factory."""

    COMMON_LOG_FORMAT = "COMMON_LOG_FORMAT"
    COMBINED_LOG_FORMAT = "COMBINED_LOG_FORMAT"
    APACHE_CUSTOM_LOG_FORMAT = "APACHE_CUSTOM_LOG_FORMAT"
    APACHE_ERROR_LOG_FORMAT = "APACHE_ERROR_LOG_FORMAT"
    REGEX = "REGEX"
    GROK = "GROK"
    LOG4J = "LOG4J"


class OnParseError(str, Enum):
    """What a parser does with a line its pattern does not match."""

    ERROR = "ERROR"
    IGNORE = "IGNORE"
    INCLUDE_AS_STACK_TRACE = "INCLUDE_AS_STACK_TRACE"


@dataclass(frozen=True, slots=True)
class ParsedRecord:
    """One logical log entry produced by a parser."""

    record_id: str  # "<source id>::<start offset>"
    offset: int  # absolute offset where the entry starts
    fields: dict[str, Any] = field(default_factory=dict)
    truncated: bool = False  # line was cut to the max object length
