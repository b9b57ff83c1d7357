from __future__ import annotations

import re
import unicodedata

_NON_WORD_PATTERN = re.compile(r"[\W_]+", re.UNICODE)
_WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_diacritics(value: str) -> str:
    """Remove combining marks after NFKD decomposition."""

    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def scrub(value: str | None) -> str:
    """Return the folded, punctuation-free form of *value*.

    Diacritics are removed, case is folded and everything that is not a word
    character is dropped, so ``"Müller,"`` becomes ``"muller"``.
    """

    if not value:
        return ""

    return _NON_WORD_PATTERN.sub("", strip_diacritics(value)).casefold()


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE_PATTERN.sub(" ", value).strip()


def transliterate(value: str) -> str:
    """Return an ASCII rendition of *value* (used for citation keys)."""

    return strip_diacritics(value).encode("ascii", "ignore").decode("ascii")
