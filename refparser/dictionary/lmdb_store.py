"""LMDB-backed term dictionary."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

import lmdb

from refparser.dictionary.base import Dictionary
from refparser.exceptions import StorageError

logger = logging.getLogger(__name__)

DATA_FILES = ("data.mdb", "lock.mdb")


class LMDBDictionary(Dictionary):
    """Term counts stored in a memory-mapped LMDB environment at ``path``.

    LMDB serializes writers and lets readers proceed concurrently; callers
    must not truncate while other threads still read.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        source: Path | str | None = None,
        map_size: int = 1 << 22,
        writemap: bool = True,
        map_async: bool = True,
    ) -> None:
        super().__init__(source=source)
        self.path = Path(path)
        self.map_size = map_size
        self.writemap = writemap
        self.map_async = map_async
        self.env: Optional[lmdb.Environment] = None

    def is_open(self) -> bool:
        return self.env is not None

    def _open(self) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        try:
            self.env = lmdb.open(
                str(self.path),
                map_size=self.map_size,
                writemap=self.writemap,
                map_async=self.map_async,
            )
        except lmdb.Error as exc:
            raise StorageError(f"Failed to open dictionary at {self.path}: {exc}") from exc
        logger.debug("Opened dictionary at %s", self.path)

    def _close(self) -> None:
        if self.env is None:
            raise StorageError("Dictionary is not open")
        self.env.close()
        self.env = None

    def _size(self) -> int:
        if self.env is None:
            raise StorageError("Dictionary is not open")
        return int(self.env.stat()["entries"])

    def _get(self, key: str) -> int:
        if self.env is None:
            return 0
        with self.env.begin() as txn:
            value = txn.get(key.encode("utf-8"))
        if value is None:
            return 0
        return int(value.decode("ascii") or 0)

    def _put(self, key: str, value: int) -> None:
        self._put_many([(key, value)])

    def _put_many(self, items: Iterable[Tuple[str, int]]) -> None:
        if self.env is None:
            raise StorageError("Dictionary is not open")
        try:
            with self.env.begin(write=True) as txn:
                for key, value in items:
                    txn.put(self._key(key).encode("utf-8"), str(max(0, int(value))).encode("ascii"))
        except lmdb.Error as exc:
            raise StorageError(f"Failed to write dictionary at {self.path}: {exc}") from exc

    def _truncate(self) -> None:
        for name in DATA_FILES:
            (self.path / name).unlink(missing_ok=True)


__all__ = ["LMDBDictionary"]
