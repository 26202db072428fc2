"""
Tests for cache storage backends and the network fetcher.
"""

import uuid

import httpx
import pytest
import redis

from offline_cache.config import get_redis_client
from offline_cache.entities import CacheEntry, CachedRequest, CachedResponse
from offline_cache.exceptions import NetworkError
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage, RedisCacheStorage
from offline_cache.repositories.redis_repository import decode_entry, encode_entry

from .conftest import ORIGIN


def sample_response(body: bytes = b"\x89PNG\r\n\x1a\n\x00binary") -> CachedResponse:
    return CachedResponse(
        status=200,
        headers={"Content-Type": "image/png", "ETag": '"abc"'},
        body=body,
        url=f"{ORIGIN}/logo.png",
        cookies=("session=abc; Path=/", "theme=dark; Expires=Wed, 21 Oct 2026 07:28:00 GMT"),
    )


@pytest.fixture
def redis_storage():
    """Redis storage under a throwaway prefix; skipped when Redis is not running."""
    client = get_redis_client()
    try:
        client.ping()
    except redis.RedisError:
        pytest.skip("Redis is not running")

    prefix = f"offline_cache_test_{uuid.uuid4().hex}"
    storage = RedisCacheStorage(redis_client=client, key_prefix=prefix)
    yield storage
    for key in client.scan_iter(match=f"{prefix}:*"):
        client.delete(key)


@pytest.fixture(params=["memory", "redis"])
def any_storage(request):
    if request.param == "memory":
        return MemoryCacheStorage()
    return request.getfixturevalue("redis_storage")


def test_match_twice_returns_identical_bodies(any_storage):
    """Test that repeated reads of one key give byte-identical bodies."""
    cache = any_storage.open("dynamic-test")
    request = CachedRequest.get(f"{ORIGIN}/logo.png")
    cache.put(request, sample_response())

    first = cache.match(request)
    second = cache.match(request)

    assert first.body == second.body == sample_response().body
    assert first.headers == {"content-type": "image/png", "etag": '"abc"'}


def test_put_replaces_and_keys_keep_write_order(any_storage):
    """Test replacement and insertion order of keys."""
    cache = any_storage.open("dynamic-test")
    a = CachedRequest.get(f"{ORIGIN}/a.js")
    b = CachedRequest.get(f"{ORIGIN}/b.js")
    cache.put(a, sample_response(b"a1"))
    cache.put(b, sample_response(b"b1"))
    cache.put(a, sample_response(b"a2"))

    assert cache.count() == 2
    assert cache.match(a).body == b"a2"
    assert [r.url for r in cache.keys()] == [b.url, a.url]


def test_delete_entry(any_storage):
    """Test deleting a single entry."""
    cache = any_storage.open("dynamic-test")
    request = CachedRequest.get(f"{ORIGIN}/a.js")
    cache.put(request, sample_response())

    assert cache.delete(request) is True
    assert cache.delete(request) is False
    assert cache.match(request) is None


def test_partition_registry(any_storage):
    """Test opening, listing and dropping partitions."""
    any_storage.open("static-v1").put(CachedRequest.get(f"{ORIGIN}/"), sample_response())
    any_storage.open("dynamic-v1")

    assert sorted(any_storage.keys()) == ["dynamic-v1", "static-v1"]
    assert any_storage.has("static-v1")
    assert any_storage.delete("static-v1") is True
    assert any_storage.delete("static-v1") is False
    assert not any_storage.has("static-v1")
    assert any_storage.open("static-v1").count() == 0
    assert any_storage.health_check()


def test_submissions_with_different_bodies_do_not_collide():
    """Test that two queued POSTs to one URL are stored side by side."""
    cache = MemoryCacheStorage().open("dynamic-test")
    first = CachedRequest(method="POST", url=f"{ORIGIN}/api/contact", body=b'{"name": "Avi"}')
    second = CachedRequest(method="POST", url=f"{ORIGIN}/api/contact", body=b'{"name": "Noa"}')

    cache.put(first, CachedResponse(status=202))
    cache.put(second, CachedResponse(status=202))

    assert first.cache_key != second.cache_key
    assert [r.body for r in cache.keys()] == [first.body, second.body]


def test_entry_encoding_keeps_binary_bodies():
    """Test that the Redis JSON encoding preserves request and response bytes."""
    entry = CacheEntry(
        request=CachedRequest(method="POST", url=f"{ORIGIN}/api/contact", body=b"\x00\xff"),
        response=sample_response(),
        stored_at=1700000000.5,
    )

    assert decode_entry(encode_entry(entry)) == entry


# Network fetcher


@pytest.mark.asyncio
async def test_fetcher_keeps_repeated_headers():
    """Test that repeated fields are joined and every Set-Cookie survives."""

    def site(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers=[
                ("content-type", "text/html"),
                ("vary", "Accept"),
                ("vary", "Accept-Encoding"),
                ("set-cookie", "session=abc; Path=/"),
                ("set-cookie", "theme=dark; Expires=Wed, 21 Oct 2026 07:28:00 GMT"),
            ],
            content=b"<html></html>",
        )

    fetcher = HttpxFetcher(origin_url=ORIGIN, transport=httpx.MockTransport(site))

    response = await fetcher.fetch(CachedRequest.get(f"{ORIGIN}/"))

    assert response.headers["vary"] == "Accept, Accept-Encoding"
    assert "set-cookie" not in response.headers
    assert response.cookies == (
        "session=abc; Path=/",
        "theme=dark; Expires=Wed, 21 Oct 2026 07:28:00 GMT",
    )
    await fetcher.close()


@pytest.mark.asyncio
async def test_fetcher_maps_redirect_loop_to_network_error():
    """Test that a request that never completes raises NetworkError."""

    def site(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"location": str(request.url)})

    fetcher = HttpxFetcher(origin_url=ORIGIN, transport=httpx.MockTransport(site))

    with pytest.raises(NetworkError) as exc_info:
        await fetcher.fetch(CachedRequest.get(f"{ORIGIN}/loop"))

    assert exc_info.value.url == f"{ORIGIN}/loop"
    await fetcher.close()
