from __future__ import annotations

from taskdeck.config import TaskConfig

from .file_storage import FileDocumentStorage
from .interface import DocumentStorage
from .memory import MemoryDocumentStorage


def build_storage(config: TaskConfig) -> DocumentStorage:
    if config.storage_backend == "memory":
        return MemoryDocumentStorage()
    if config.storage_backend == "redis":
        # Imported lazily so the redis client is only touched when selected
        from .redis_storage import RedisDocumentStorage

        return RedisDocumentStorage(
            url=config.redis_url,
            key_prefix=config.redis_prefix,
            storage_key=config.storage_key,
        )
    return FileDocumentStorage(config.storage_path)


__all__ = [
    "DocumentStorage",
    "FileDocumentStorage",
    "MemoryDocumentStorage",
    "build_storage",
]
