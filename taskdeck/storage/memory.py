from __future__ import annotations

from taskdeck.storage.interface import DocumentStorage


class MemoryDocumentStorage(DocumentStorage):
    def __init__(self, payload: str | None = None) -> None:
        self._payload = payload
        self.writes = 0

    def read(self) -> str | None:
        return self._payload

    def write(self, payload: str) -> None:
        self._payload = payload
        self.writes += 1

    def clear(self) -> None:
        self._payload = None


__all__ = ["MemoryDocumentStorage"]
