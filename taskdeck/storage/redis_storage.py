from __future__ import annotations

from typing import cast

import redis

from taskdeck.errors import PersistenceError
from taskdeck.storage.interface import DocumentStorage


class RedisDocumentStorage(DocumentStorage):
    """Redis-backed document slot.

    Data structures:
    - One string key `{prefix}:{storage_key}` holding the JSON document
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        client: redis.Redis | None = None,
        key_prefix: str = "taskdeck",
        storage_key: str = "task-manager-data",
    ) -> None:
        if client is None:
            if url is None:
                raise ValueError("either url or client is required")
            client = redis.Redis.from_url(url)
        self._redis: redis.Redis = client
        self._key = f"{key_prefix.rstrip(':')}:{storage_key}"

    @property
    def key(self) -> str:
        return self._key

    def read(self) -> str | None:
        try:
            raw = cast(bytes | None, self._redis.get(self._key))
        except redis.exceptions.RedisError as e:
            raise PersistenceError(f"redis read failed: {e}") from e
        return None if raw is None else raw.decode("utf-8")

    def write(self, payload: str) -> None:
        try:
            self._redis.set(self._key, payload.encode("utf-8"))
        except redis.exceptions.RedisError as e:
            raise PersistenceError(f"redis write failed: {e}") from e

    def clear(self) -> None:
        try:
            self._redis.delete(self._key)
        except redis.exceptions.RedisError as e:
            raise PersistenceError(f"redis delete failed: {e}") from e


__all__ = ["RedisDocumentStorage"]
