"""Log formats: layout translators and line parsers.

Contains the Apache and log4j layout translators, the fixed-format Grok
expressions and the Grok/regex line parsers built by the factory.
"""

from __future__ import annotations

from .apache import translate_apache_layout
from .base import ORIGINAL_LINE_FIELD, STACK_TRACE_FIELD, LogLineParser, LogParser
from .constants import (
    APACHE_ERROR_LOG_FORMAT_EXPRESSION,
    COMBINED_LOG_FORMAT_EXPRESSION,
    COMMON_LOG_FORMAT_EXPRESSION,
)
from .grok import GrokParser
from .log4j import translate_log4j_layout
from .regex import RegexParser

__all__ = [
    "APACHE_ERROR_LOG_FORMAT_EXPRESSION",
    "COMBINED_LOG_FORMAT_EXPRESSION",
    "COMMON_LOG_FORMAT_EXPRESSION",
    "GrokParser",
    "LogLineParser",
    "LogParser",
    "ORIGINAL_LINE_FIELD",
    "RegexParser",
    "STACK_TRACE_FIELD",
    "translate_apache_layout",
    "translate_log4j_layout",
]
