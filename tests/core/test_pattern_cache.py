from __future__ import annotations

import re
import threading
import time

import pytest

from mcp_log_parsing_server.core.cache import PatternCache


def test_same_source_returns_same_object() -> None:
    cache: PatternCache[re.Pattern[str]] = PatternCache(re.compile)

    first = cache.get(r"\d+")
    second = cache.get(r"\d+")

    assert first is second
    assert r"\d+" in cache
    assert len(cache) == 1


def test_distinct_sources_are_compiled_separately() -> None:
    cache: PatternCache[re.Pattern[str]] = PatternCache(re.compile)
    assert cache.get("a") is not cache.get("b")
    assert len(cache) == 2


def test_failed_compile_is_not_stored() -> None:
    calls = 0

    def compile_fn(source: str) -> str:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise ValueError("first attempt fails")
        return source.upper()

    cache: PatternCache[str] = PatternCache(compile_fn)
    with pytest.raises(ValueError):
        cache.get("x")
    assert "x" not in cache

    assert cache.get("x") == "X"
    assert calls == 2


def test_concurrent_first_requests_compile_once() -> None:
    calls = 0

    def slow_compile(source: str) -> object:
        nonlocal calls
        calls += 1
        time.sleep(0.01)
        return object()

    cache: PatternCache[object] = PatternCache(slow_compile)
    barrier = threading.Barrier(8)
    results: list[object] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        value = cache.get("shared")
        with lock:
            results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert calls == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)
