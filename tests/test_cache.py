from __future__ import annotations

import threading
import time
import traceback
from concurrent.futures import ThreadPoolExecutor

import pytest

from mirrorc.mirror import (
    ArityMismatch, DescriptorCache, EntryState, NoCanonicalConstructor, PythonReflection,
    ReflectiveBridge, TypeMetadata,
)

THREADS = 8


class CountingBridge:
    """Wraps the real bridge; counts introspections and holds each one open briefly."""

    def __init__(self, delay: float = 0.05) -> None:
        self.inner = ReflectiveBridge(PythonReflection())
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def introspect(self, identity: str) -> TypeMetadata:
        with self._lock:
            self.calls += 1
        time.sleep(self.delay)
        return self.inner.introspect(identity)


def _concurrently(fn, n: int = THREADS) -> list:
    barrier = threading.Barrier(n)

    def run(_):
        barrier.wait()
        return fn()

    with ThreadPoolExecutor(max_workers=n) as pool:
        return list(pool.map(run, range(n)))


def test_concurrent_first_requests_compute_once():
    bridge = CountingBridge()
    cache = DescriptorCache(bridge.introspect)

    results = _concurrently(lambda: cache.get_or_compute("shapes:Point"))

    assert bridge.calls == 1
    assert all(meta is results[0] for meta in results)
    assert results[0].labels == ("x", "y")
    assert cache.peek("shapes:Point").state is EntryState.READY


def test_concurrent_first_requests_share_failure():
    bridge = CountingBridge()
    cache = DescriptorCache(bridge.introspect)

    def request():
        try:
            cache.get_or_compute("shapes:Blob")
        except NoCanonicalConstructor as exc:
            return exc
        return None

    failures = _concurrently(request)

    assert bridge.calls == 1
    assert failures[0] is not None
    assert all(exc is failures[0] for exc in failures)


def test_failure_persists_without_recomputing():
    bridge = CountingBridge(delay=0)
    cache = DescriptorCache(bridge.introspect)

    with pytest.raises(NoCanonicalConstructor) as first:
        cache.get_or_compute("shapes:Ambiguous")
    with pytest.raises(NoCanonicalConstructor) as second:
        cache.get_or_compute("shapes:Ambiguous")

    assert first.value is second.value
    assert bridge.calls == 1
    assert cache.peek("shapes:Ambiguous").state is EntryState.FAILED


def test_cached_failure_traceback_does_not_grow():
    cache = DescriptorCache(CountingBridge(delay=0).introspect)

    depths = []
    for _ in range(4):
        with pytest.raises(NoCanonicalConstructor) as excinfo:
            cache.get_or_compute("shapes:Blob")
        depths.append(len(traceback.extract_tb(excinfo.value.__traceback__)))

    # The first raise also carries the bridge frames; every later one is identical
    assert depths[1] == depths[2] == depths[3]
    assert depths[1] <= depths[0]


def test_identities_are_independent():
    bridge = CountingBridge(delay=0)
    cache = DescriptorCache(bridge.introspect)

    point = cache.get_or_compute("shapes:Point")
    vec = cache.get_or_compute("shapes:Vec")
    assert cache.get_or_compute("shapes:Point") is point
    assert point != vec
    assert bridge.calls == 2
    assert len(cache) == 2
    assert sorted(cache.identities()) == ["shapes:Point", "shapes:Vec"]


def test_arity_errors_are_not_cached():
    bridge = CountingBridge(delay=0)
    cache = DescriptorCache(bridge.introspect)
    meta = cache.get_or_compute("shapes:Point")

    with pytest.raises(ArityMismatch):
        meta.construct([1, 2, 3])
    assert cache.get_or_compute("shapes:Point") is meta
    assert bridge.calls == 1


def test_reentrant_request_is_an_internal_error():
    cache: DescriptorCache

    def compute(identity):
        return cache.get_or_compute(identity)

    cache = DescriptorCache(compute)
    with pytest.raises(RuntimeError, match="CE0002"):
        cache.get_or_compute("shapes:Point")


class Abort(BaseException):
    pass


def test_interrupted_computation_is_withdrawn():
    calls = []
    inner = ReflectiveBridge(PythonReflection())

    def compute(identity):
        calls.append(identity)
        if len(calls) == 1:
            raise Abort()
        return inner.introspect(identity)

    cache = DescriptorCache(compute)
    with pytest.raises(Abort):
        cache.get_or_compute("shapes:Point")
    assert "shapes:Point" not in cache

    meta = cache.get_or_compute("shapes:Point")
    assert meta.labels == ("x", "y")
    assert len(calls) == 2
