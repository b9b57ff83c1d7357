"""Term dictionary contract shared by the persistent and in-memory stores."""

from __future__ import annotations

import gzip
import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from refparser.core.strings import scrub

logger = logging.getLogger(__name__)


class Dictionary:
    """Mapping of normalized terms to non-negative occurrence counts.

    Subclasses provide the storage primitives (``_open``, ``_close``, ``_size``,
    ``_get``, ``_put``, ``_truncate``). Opening an empty store populates it
    once from ``source`` when a word list is configured.
    """

    def __init__(self, *, source: Path | str | None = None) -> None:
        self.source = Path(source) if source is not None else None

    def __enter__(self) -> "Dictionary":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> "Dictionary":
        if not self.is_open():
            self._open()
        if self.is_empty():
            self.populate()
        return self

    def close(self) -> None:
        if self.is_open():
            self._close()

    def is_open(self) -> bool:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return self.is_open() and self._size() == 0

    def __len__(self) -> int:
        return self._size() if self.is_open() else 0

    def get(self, key: object) -> int:
        return self._get(self._key(key))

    def put(self, key: object, value: object) -> None:
        if not self.is_open():
            self._open()
        self._put(self._key(key), max(0, int(value)))  # type: ignore[call-overload]

    def truncate(self) -> None:
        self.close()
        self._truncate()

    def populate(self) -> None:
        """Load term counts from the configured word list."""

        if self.source is None:
            logger.debug("No dictionary source configured; skipping population")
            return
        if not self.source.is_file():
            logger.warning("Dictionary source %s does not exist; skipping population", self.source)
            return

        counts: Counter[str] = Counter()
        for term, count in self._read_source(self.source):
            counts[term] += count

        logger.debug("Populating dictionary with %d terms from %s", len(counts), self.source)
        self._put_many(counts.items())

    @staticmethod
    def _key(key: object) -> str:
        return str(key)

    @staticmethod
    def _read_source(path: Path) -> Iterator[Tuple[str, int]]:
        opener = gzip.open if path.suffix == ".gz" else open
        with opener(path, "rt", encoding="utf-8") as handle:  # type: ignore[operator]
            for line in handle:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                parts = line.rsplit(None, 1)
                count = 1
                if len(parts) == 2 and parts[1].isdigit():
                    line, count = parts[0], int(parts[1])
                term = scrub(line)
                if term:
                    yield term, count

    def _put_many(self, items: Iterable[Tuple[str, int]]) -> None:
        for key, value in items:
            self.put(key, value)

    def _open(self) -> None:
        raise NotImplementedError

    def _close(self) -> None:
        raise NotImplementedError

    def _size(self) -> int:
        raise NotImplementedError

    def _get(self, key: str) -> int:
        raise NotImplementedError

    def _put(self, key: str, value: int) -> None:
        raise NotImplementedError

    def _truncate(self) -> None:
        raise NotImplementedError


__all__ = ["Dictionary"]
