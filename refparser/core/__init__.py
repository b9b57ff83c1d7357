"""Core data models and string helpers for the reference parser."""

from .models import Dataset, Record, Sequence, Token
from .strings import collapse_whitespace, scrub, strip_diacritics, transliterate

__all__ = [
    "Dataset",
    "Record",
    "Sequence",
    "Token",
    "collapse_whitespace",
    "scrub",
    "strip_diacritics",
    "transliterate",
]
