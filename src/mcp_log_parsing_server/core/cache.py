"""Compiled-pattern cache owned by a parser factory."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class PatternCache(Generic[T]):
    """Maps a pattern source string to its compiled form.

    Compilation runs under the cache lock, so concurrent first requests for the
    same key compile once and every caller gets the same object. Failed
    compilations propagate and are not stored. Entries are never evicted.
    """

    def __init__(self, compile_fn: Callable[[str], T], *, name: str = "pattern"):
        self._compile = compile_fn
        self._name = name
        self._entries: dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, source: str) -> T:
        """Return the compiled pattern for ``source``, compiling it on first use."""
        with self._lock:
            compiled = self._entries.get(source)
            if compiled is None:
                logger.debug("Compiling %s cache entry: %r", self._name, source)
                compiled = self._compile(source)
                self._entries[source] = compiled
            return compiled

    def __contains__(self, source: object) -> bool:
        with self._lock:
            return source in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
