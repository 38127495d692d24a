"""Grok named-pattern compiler.

Contains the dictionary loader/resolver, the compiled matcher and the
providers that serve the bundled pattern dictionaries.
"""

from __future__ import annotations

from .dictionary import GrokDictionary
from .grok import Capture, Grok
from .providers import (
    APACHE_ERROR_LOG_PATTERNS,
    BASE_DICTIONARIES,
    BUILTIN_DICTIONARIES,
    GROK_PATTERNS,
    JAVA_LOG_PATTERNS,
    LOG4J_PATTERNS,
    DictionaryProvider,
    PackageDictionaryProvider,
    StaticDictionaryProvider,
)

__all__ = [
    "APACHE_ERROR_LOG_PATTERNS",
    "BASE_DICTIONARIES",
    "BUILTIN_DICTIONARIES",
    "Capture",
    "DictionaryProvider",
    "GROK_PATTERNS",
    "Grok",
    "GrokDictionary",
    "JAVA_LOG_PATTERNS",
    "LOG4J_PATTERNS",
    "PackageDictionaryProvider",
    "StaticDictionaryProvider",
]
