"""ModSec Review - Reverse DNS cache"""

import asyncio
import functools
import logging
import socket
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Awaitable, Callable, Dict, Iterable, Optional

from .models import LookupResult

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[str]]


async def reverse_dns(ip: str, executor: Optional[Executor] = None) -> str:
    """Resolve an IP to its primary hostname through the system resolver"""
    loop = asyncio.get_running_loop()
    hostname, _aliases, _addresses = await loop.run_in_executor(executor, socket.gethostbyaddr, ip)
    return hostname


class ReverseLookupCache:
    """Caches one lookup result per IP for the lifetime of the object.

    Failures are cached too, so an IP that does not resolve is only asked
    about once. Concurrent requests for the same IP share a single in-flight
    lookup. Without a custom resolver, lookups run on the cache's own thread
    pool; ``close()`` releases it without waiting on stuck resolver calls.
    """

    def __init__(self, resolver: Optional[Resolver] = None, timeout: Optional[float] = None):
        self._executor: Optional[ThreadPoolExecutor] = None
        if resolver is None:
            self._executor = ThreadPoolExecutor(thread_name_prefix="reverse-dns")
            resolver = functools.partial(reverse_dns, executor=self._executor)
        self.resolver = resolver
        self.timeout = timeout
        self.calls = 0
        self._results: Dict[str, LookupResult] = {}
        self._pending: Dict[str, asyncio.Future] = {}

    def __contains__(self, ip: str) -> bool:
        return ip in self._results

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    async def resolve(self, ip: str) -> LookupResult:
        cached = self._results.get(ip)
        if cached is not None:
            return cached

        pending = self._pending.get(ip)
        if pending is None:
            pending = asyncio.ensure_future(self._lookup(ip))
            self._pending[ip] = pending
        return await asyncio.shield(pending)

    async def resolve_many(self, ips: Iterable[str]) -> Dict[str, LookupResult]:
        unique = list(dict.fromkeys(ips))
        results = await asyncio.gather(*(self.resolve(ip) for ip in unique))
        return dict(zip(unique, results))

    async def _lookup(self, ip: str) -> LookupResult:
        self.calls += 1
        try:
            if self.timeout is None:
                hostname = await self.resolver(ip)
            else:
                hostname = await asyncio.wait_for(self.resolver(ip), self.timeout)
        except Exception as e:
            logger.debug("reverse lookup failed for %s: %r", ip, e)
            result = LookupResult.failed()
        else:
            result = LookupResult.resolved(hostname) if hostname else LookupResult.failed()
        finally:
            self._pending.pop(ip, None)

        self._results[ip] = result
        return result
