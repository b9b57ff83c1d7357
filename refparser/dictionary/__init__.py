"""Term dictionary stores used as labeling evidence."""

from .base import Dictionary
from .lmdb_store import LMDBDictionary
from .memory import MemoryDictionary

__all__ = ["Dictionary", "LMDBDictionary", "MemoryDictionary"]
