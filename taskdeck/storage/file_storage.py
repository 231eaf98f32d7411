from __future__ import annotations

import os
import tempfile
from pathlib import Path

from taskdeck.errors import PersistenceError
from taskdeck.storage.interface import DocumentStorage


class FileDocumentStorage(DocumentStorage):
    """JSON document kept in a single file.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace`` so a crash never leaves a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str | None:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"failed to read {self._path}: {e}") from e

    def write(self, payload: str) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp, self._path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"failed to write {self._path}: {e}") from e

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"failed to remove {self._path}: {e}") from e


__all__ = ["FileDocumentStorage"]
