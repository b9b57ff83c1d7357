"""Parse free-text bibliographic references into structured records."""

from __future__ import annotations

import atexit
from typing import Any, Optional

from .cache import InstanceCache
from .config import ParserConfig
from .core.models import Dataset, Record, Sequence, Token
from .exceptions import (
    ConfigError,
    DatasetError,
    FormatError,
    ModelError,
    NormalizationError,
    RefParserError,
    StorageError,
)
from .parser import Parser

_default_parsers: InstanceCache[Parser] = InstanceCache(Parser)
_close_callback_registered = False


def get_default_parser() -> Parser:
    """Return the calling thread's default ``Parser``, creating it lazily."""

    global _close_callback_registered
    if not _close_callback_registered:
        atexit.register(reset_default_parser)
        _close_callback_registered = True
    return _default_parsers.get()


def reset_default_parser() -> None:
    """Close and forget the default parsers of all threads."""

    _default_parsers.reset()


def parse(input: Any, format: Optional[str] = None) -> Any:
    """Parse references with the default parser."""

    return get_default_parser().parse(input, format=format)


__all__ = [
    "ConfigError",
    "Dataset",
    "DatasetError",
    "FormatError",
    "ModelError",
    "NormalizationError",
    "Parser",
    "ParserConfig",
    "Record",
    "RefParserError",
    "Sequence",
    "StorageError",
    "Token",
    "get_default_parser",
    "parse",
    "reset_default_parser",
]
