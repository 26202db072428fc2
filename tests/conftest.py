"""
Shared fixtures: a fake site served through httpx.MockTransport.
"""

import asyncio

import httpx
import pytest

from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage
from offline_cache.services import OfflineCacheService

ORIGIN = "https://doctorfix.test"
VERSION = "doctorfix-test"
STATIC_CACHE = "static-test"
DYNAMIC_CACHE = "dynamic-test"

HTML = "text/html; charset=utf-8"


class FakeSite:
    """Serves canned responses by absolute URL and records every request."""

    def __init__(self) -> None:
        self.pages: dict[str, tuple[int, bytes, str]] = {}
        self.offline = False
        self.gate: asyncio.Event | None = None
        self.calls: list[httpx.Request] = []

    def add(self, url: str, body: str, status: int = 200, content_type: str = HTML) -> None:
        if url.startswith("/"):
            url = f"{ORIGIN}{url}"
        self.pages[url] = (status, body.encode("utf-8"), content_type)

    def calls_to(self, url: str) -> int:
        if url.startswith("/"):
            url = f"{ORIGIN}{url}"
        return sum(1 for r in self.calls if str(r.url) == url)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.offline:
            raise httpx.ConnectError("Network is unreachable", request=request)

        if request.method == "POST":
            return httpx.Response(200, json={"success": True})

        status, body, content_type = self.pages.get(
            str(request.url), (404, b"Not Found", "text/plain")
        )
        return httpx.Response(status, content=body, headers={"content-type": content_type})


@pytest.fixture
def site() -> FakeSite:
    """A site with the pre-cached static assets in place."""
    fake = FakeSite()
    fake.add("/", "<html>home</html>")
    fake.add("/index.html", "<html>home</html>")
    fake.add("/manifest.json", '{"name": "Doctor Fix"}', content_type="application/json")
    fake.add("/favicon.ico", "ico", content_type="image/x-icon")
    return fake


@pytest.fixture
def fetcher(site: FakeSite) -> HttpxFetcher:
    return HttpxFetcher(origin_url=ORIGIN, transport=httpx.MockTransport(site.handle))


@pytest.fixture
def storage() -> MemoryCacheStorage:
    return MemoryCacheStorage()


@pytest.fixture
def worker(storage: MemoryCacheStorage, fetcher: HttpxFetcher) -> OfflineCacheService:
    return OfflineCacheService(
        storage=storage,
        fetcher=fetcher,
        origin_url=ORIGIN,
        version=VERSION,
        static_cache_name=STATIC_CACHE,
        dynamic_cache_name=DYNAMIC_CACHE,
    )
