from __future__ import annotations

from typing import Protocol


class DocumentStorage(Protocol):
    """Durable slot holding exactly one serialized storage document.

    Keep this tiny so backends can be swapped without touching the facade.
    Implementations raise ``PersistenceError`` on I/O failure.
    """

    def read(self) -> str | None:
        """Return the stored document text, or None when nothing was saved yet."""

    def write(self, payload: str) -> None:
        """Replace the stored document with ``payload``."""

    def clear(self) -> None:
        """Remove the stored document."""


__all__ = ["DocumentStorage"]
