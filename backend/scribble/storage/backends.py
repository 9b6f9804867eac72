from __future__ import annotations

import logging
from threading import RLock

import redis


logger = logging.getLogger(__name__)


class StoreUnavailable(RuntimeError):
    """The key-value backend could not be reached."""


class MemoryStore:
    def __init__(self) -> None:
        self._lock = RLock()
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set_many(self, items: dict[str, str]) -> None:
        with self._lock:
            self._data.update(items)

    def delete(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._data.pop(key, None)


class RedisStore:
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, timeout_sec: float = 2.0) -> RedisStore:
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=timeout_sec,
            socket_connect_timeout=timeout_sec,
        )
        return cls(client)

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"redis get {key} failed") from exc

    def set_many(self, items: dict[str, str]) -> None:
        if not items:
            return
        try:
            with self._client.pipeline(transaction=True) as pipe:
                for key, value in items.items():
                    pipe.set(key, value)
                pipe.execute()
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"redis set {', '.join(items)} failed") from exc

    def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            self._client.delete(*keys)
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"redis delete {', '.join(keys)} failed") from exc


def create_backend(redis_url: str = "", timeout_sec: float = 2.0) -> MemoryStore | RedisStore:
    if redis_url:
        logger.info("using redis store at %s", redis_url)
        return RedisStore.from_url(redis_url, timeout_sec=timeout_sec)
    logger.info("using in-memory store")
    return MemoryStore()
