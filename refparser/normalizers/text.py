"""Normalizers that clean up quotation marks, punctuation and container titles."""

from __future__ import annotations

import re
from typing import Optional

from refparser.core.models import Record
from refparser.core.strings import collapse_whitespace
from refparser.normalizers.base import Normalizer

NAME_KEYS = ("author", "editor", "translator", "director")
LOCATOR_KEYS = ("url", "doi")

_LEADING_QUOTES = re.compile(r"^[\s\"“”„«»‹›‘’]+")
_TRAILING_QUOTES = re.compile(r"[\s\"“”„«»‹›‘’]+([.,;:!?]*)\s*$")
_LEADING_PUNCTUATION = re.compile(r"^[\s,;:.]+")
_TRAILING_PUNCTUATION = re.compile(r"[\s,;:./]+$")
_CONTAINER_PREFIX = re.compile(r"^\s*(?:in|dans)\s*:\s*|^\s*in\s+(?=\S)", re.IGNORECASE)
_JOURNAL_PREFIX = re.compile(r"^\s*(?:in|dans)\s*:\s*", re.IGNORECASE)
_CONTAINER_EDITOR_SUFFIX = re.compile(r"\s*\((?:eds?|hrsg|hg|dir)\.?\)\s*$", re.IGNORECASE)


def _strip_unbalanced(value: str, opener: str, closer: str) -> str:
    if value.startswith(opener) and closer not in value:
        value = value[1:]
    if value.endswith(closer) and opener not in value:
        value = value[:-1]
    if value.endswith(opener):
        value = value[:-1]
    if value.startswith(closer):
        value = value[1:]
    return value


class Quotes(Normalizer):
    """Remove quotation marks surrounding titles and other text fields."""

    key = "quotes"

    def normalize(self, record: Record) -> Record:
        keys = [key for key in record if key not in NAME_KEYS and key not in LOCATOR_KEYS and key != "type"]
        self.map_values(record, keys, self.strip_quotes)
        return record

    @staticmethod
    def strip_quotes(value: str) -> str:
        value = _LEADING_QUOTES.sub("", value)
        return _TRAILING_QUOTES.sub(r"\1", value)


class Punctuation(Normalizer):
    """Trim separators left between fields after labeling."""

    key = "punctuation"

    def normalize(self, record: Record) -> Record:
        keys = [key for key in record if key not in LOCATOR_KEYS and key != "type"]
        self.map_values(record, keys, self.strip_punctuation)
        return record

    @staticmethod
    def strip_punctuation(value: str) -> Optional[str]:
        value = collapse_whitespace(value)
        value = _LEADING_PUNCTUATION.sub("", value)
        value = _TRAILING_PUNCTUATION.sub("", value)
        for opener, closer in (("(", ")"), ("[", "]")):
            value = _strip_unbalanced(value, opener, closer)
        return value.strip() or None


class Container(Normalizer):
    """Drop ``In:`` prefixes and trailing editor markers from container titles."""

    key = "container"

    def normalize(self, record: Record) -> Record:
        self.map_values(record, ("container-title",), self.clean)
        self.map_values(record, ("journal",), lambda value: _JOURNAL_PREFIX.sub("", value, count=1))
        return record

    @staticmethod
    def clean(value: str) -> str:
        value = _CONTAINER_PREFIX.sub("", value, count=1)
        return _CONTAINER_EDITOR_SUFFIX.sub("", value).strip()


__all__ = ["Container", "LOCATOR_KEYS", "NAME_KEYS", "Punctuation", "Quotes"]
