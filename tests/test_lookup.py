# tests/test_lookup.py
import asyncio

from modsec_review.lookup import ReverseLookupCache
from modsec_review.models import LookupResult, LookupState
from modsec_review.patterns import NO_LOOKUP, NO_RESULT

from helpers import FakeResolver


def test_resolves_and_caches(resolver):
    cache = ReverseLookupCache(resolver)

    async def go():
        first = await cache.resolve("1.1.1.1")
        second = await cache.resolve("1.1.1.1")
        return first, second

    first, second = asyncio.run(go())
    assert first == LookupResult.resolved("one.one.one.one")
    assert second is first
    assert resolver.calls == ["1.1.1.1"]
    assert "1.1.1.1" in cache


def test_failure_is_cached_not_raised(resolver):
    cache = ReverseLookupCache(resolver)

    async def go():
        return [await cache.resolve("10.0.0.1") for _ in range(3)]

    results = asyncio.run(go())
    assert all(r.state is LookupState.FAILED for r in results)
    assert results[0].display() == NO_RESULT
    assert resolver.calls == ["10.0.0.1"]


def test_concurrent_requests_share_one_lookup():
    resolver = FakeResolver({"1.1.1.1": "one.one.one.one"}, delay=0.01)
    cache = ReverseLookupCache(resolver)

    async def go():
        return await asyncio.gather(*(cache.resolve("1.1.1.1") for _ in range(5)))

    results = asyncio.run(go())
    assert {r.hostname for r in results} == {"one.one.one.one"}
    assert resolver.calls == ["1.1.1.1"]
    assert cache.calls == 1


def test_resolve_many_keeps_first_seen_order(resolver):
    cache = ReverseLookupCache(resolver)
    results = asyncio.run(cache.resolve_many(["8.8.8.8", "10.0.0.1", "8.8.8.8", "1.1.1.1"]))

    assert list(results) == ["8.8.8.8", "10.0.0.1", "1.1.1.1"]
    assert results["8.8.8.8"].display() == "dns.google"
    assert results["10.0.0.1"].state is LookupState.FAILED
    assert sorted(resolver.calls) == ["1.1.1.1", "10.0.0.1", "8.8.8.8"]


def test_slow_lookup_times_out_without_blocking_others():
    hosts = {"1.1.1.1": "one.one.one.one"}

    async def resolver(ip):
        if ip == "6.6.6.6":
            await asyncio.sleep(10)
        return hosts[ip]

    cache = ReverseLookupCache(resolver, timeout=0.05)
    results = asyncio.run(cache.resolve_many(["6.6.6.6", "1.1.1.1"]))

    assert results["6.6.6.6"].state is LookupState.FAILED
    assert results["1.1.1.1"].hostname == "one.one.one.one"


def test_empty_hostname_counts_as_failure():
    async def resolver(ip):
        return ""

    result = asyncio.run(ReverseLookupCache(resolver).resolve("1.2.3.4"))
    assert result.state is LookupState.FAILED


def test_not_attempted_renders_sentinel():
    assert LookupResult.not_attempted().display() == NO_LOOKUP


def test_unexpected_resolver_error_fails_only_that_ip():
    async def resolver(ip):
        if ip == "6.6.6.6":
            raise RuntimeError("malformed response")
        return "one.one.one.one"

    results = asyncio.run(ReverseLookupCache(resolver).resolve_many(["6.6.6.6", "1.1.1.1"]))

    assert results["6.6.6.6"].state is LookupState.FAILED
    assert results["1.1.1.1"] == LookupResult.resolved("one.one.one.one")


def test_close_releases_resolver_threads():
    cache = ReverseLookupCache()
    executor = cache._executor
    assert executor is not None

    cache.close()
    cache.close()

    assert cache._executor is None
    assert executor._shutdown


def test_custom_resolver_needs_no_threads(resolver):
    cache = ReverseLookupCache(resolver)
    assert cache._executor is None
    cache.close()
