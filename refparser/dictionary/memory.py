"""In-memory term dictionary."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from refparser.dictionary.base import Dictionary
from refparser.exceptions import StorageError


class MemoryDictionary(Dictionary):
    """Term counts held in a plain ``dict``; nothing survives the process.

    Closing keeps the contents so a reopened store behaves like a persistent
    one; only ``truncate`` discards them.
    """

    def __init__(self, *, source: Path | str | None = None) -> None:
        super().__init__(source=source)
        self._data: Optional[Dict[str, int]] = None
        self._retained: Dict[str, int] = {}

    def is_open(self) -> bool:
        return self._data is not None

    def _open(self) -> None:
        self._data = self._retained

    def _close(self) -> None:
        self._data = None

    def _size(self) -> int:
        return len(self._data or {})

    def _get(self, key: str) -> int:
        if self._data is None:
            return 0
        return self._data.get(key, 0)

    def _put(self, key: str, value: int) -> None:
        if self._data is None:
            raise StorageError("Dictionary is not open")
        self._data[key] = value

    def _truncate(self) -> None:
        self._retained = {}


__all__ = ["MemoryDictionary"]
