"""Redis implementation of CacheStorage.

Layout (``<prefix>`` defaults to ``offline_cache``):
- ``<prefix>:caches`` - sorted set of partition names scored by creation time
- ``<prefix>:cache:<name>`` - hash of cache key -> JSON-encoded entry

Bodies are base64-encoded inside the JSON so they round-trip byte for byte.
"""

import base64
import json
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import redis

from offline_cache.config import get_redis_client, settings
from offline_cache.entities import CacheEntry, CachedRequest, CachedResponse
from offline_cache.exceptions import CacheStorageError


@contextmanager
def _redis_errors(action: str) -> Iterator[None]:
    """Translate Redis failures into CacheStorageError."""
    try:
        yield
    except redis.RedisError as e:
        raise CacheStorageError(f"Failed to {action}: {e}") from e


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encode_entry(entry: CacheEntry) -> str:
    """Serialize a cache entry to JSON."""
    return json.dumps(
        {
            "request": {
                "method": entry.request.method,
                "url": entry.request.url,
                "headers": entry.request.headers,
                "body": _b64(entry.request.body),
            },
            "response": {
                "status": entry.response.status,
                "headers": entry.response.headers,
                "body": _b64(entry.response.body),
                "url": entry.response.url,
                "cookies": list(entry.response.cookies),
            },
            "stored_at": entry.stored_at,
        }
    )


def decode_entry(raw: bytes | str) -> CacheEntry:
    """Deserialize a cache entry written by ``encode_entry``."""
    data: dict[str, Any] = json.loads(raw)
    req = data["request"]
    resp = data["response"]
    return CacheEntry(
        request=CachedRequest(
            method=req["method"],
            url=req["url"],
            headers=req["headers"],
            body=base64.b64decode(req["body"]),
        ),
        response=CachedResponse(
            status=resp["status"],
            headers=resp["headers"],
            body=base64.b64decode(resp["body"]),
            url=resp["url"],
            cookies=tuple(resp.get("cookies", ())),
        ),
        stored_at=float(data["stored_at"]),
    )


class RedisCache:
    """A single partition stored as one Redis hash.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, client: redis.Redis, name: str, registry_key: str, hash_key: str) -> None:
        self._client = client
        self._name = name
        self._registry_key = registry_key
        self._hash_key = hash_key

    @property
    def name(self) -> str:
        return self._name

    def match(self, request: CachedRequest) -> CachedResponse | None:
        with _redis_errors(f"read from cache {self._name}"):
            raw = self._client.hget(self._hash_key, request.cache_key)
        if raw is None:
            return None
        return decode_entry(raw).response  # type: ignore[arg-type]

    def put(self, request: CachedRequest, response: CachedResponse) -> None:
        entry = CacheEntry(request=request, response=response.clone(), stored_at=time.time())
        with _redis_errors(f"write to cache {self._name}"):
            pipe = self._client.pipeline()
            # A write re-registers the partition if it was dropped concurrently
            pipe.zadd(self._registry_key, {self._name: entry.stored_at}, nx=True)
            pipe.hset(self._hash_key, request.cache_key, encode_entry(entry))
            pipe.execute()

    def delete(self, request: CachedRequest) -> bool:
        with _redis_errors(f"delete from cache {self._name}"):
            result: int = self._client.hdel(self._hash_key, request.cache_key)  # type: ignore[assignment]
        return result > 0

    def keys(self) -> list[CachedRequest]:
        with _redis_errors(f"list cache {self._name}"):
            raw_entries = self._client.hvals(self._hash_key)
        entries = [decode_entry(raw) for raw in raw_entries]  # type: ignore[union-attr]
        entries.sort(key=lambda e: e.stored_at)
        return [entry.request for entry in entries]

    def count(self) -> int:
        with _redis_errors(f"count cache {self._name}"):
            return int(self._client.hlen(self._hash_key))  # type: ignore[arg-type]


class RedisCacheStorage:
    """Registry of partitions kept in Redis.

    Partitions are shared by every process pointing at the same Redis
    database and prefix, and survive restarts.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache storage.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key_prefix: Prefix for every Redis key. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix
        self._registry_key = f"{self._prefix}:caches"

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisCacheStorage":
        """Factory method to create RedisCacheStorage with defaults."""
        return cls(key_prefix=key_prefix)

    def _hash_key(self, name: str) -> str:
        return f"{self._prefix}:cache:{name}"

    def open(self, name: str) -> RedisCache:
        with _redis_errors(f"open cache {name}"):
            self._client.zadd(self._registry_key, {name: time.time()}, nx=True)
        return RedisCache(self._client, name, self._registry_key, self._hash_key(name))

    def has(self, name: str) -> bool:
        with _redis_errors(f"look up cache {name}"):
            return self._client.zscore(self._registry_key, name) is not None

    def delete(self, name: str) -> bool:
        with _redis_errors(f"delete cache {name}"):
            pipe = self._client.pipeline()
            pipe.zrem(self._registry_key, name)
            pipe.delete(self._hash_key(name))
            removed, _ = pipe.execute()
        return removed > 0

    def keys(self) -> list[str]:
        with _redis_errors("list caches"):
            names = self._client.zrange(self._registry_key, 0, -1)
        return [n.decode() if isinstance(n, bytes) else n for n in names]  # type: ignore[union-attr]

    def health_check(self) -> bool:
        """Check if Redis is accessible."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
