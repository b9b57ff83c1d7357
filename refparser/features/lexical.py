"""Features that look only at the token's own characters."""

from __future__ import annotations

import re
import unicodedata

from refparser.core.models import Sequence
from refparser.features.base import ABSENT, Feature

_YEAR_PATTERN = re.compile(r"[(\[]?(?:1[5-9]\d\d|20\d\d)[a-z]?[)\]]?[.,;:]?")
_RANGE_PATTERN = re.compile(r"\d+\s*[-‐-―]+\s*\d+")
_ORDINAL_PATTERN = re.compile(r"\d+(?:st|nd|rd|th|e|er)\.?", re.IGNORECASE)
_ROMAN_PATTERN = re.compile(r"m{0,4}(?:cm|cd|d?c{0,3})(?:xc|xl|l?x{0,3})(?:ix|iv|v?i{0,3})")
_DIGITS_PATTERN = re.compile(r"\d+")
_INITIAL_PATTERN = re.compile(r"(?:[^\W\d_]\.)+(?:-[^\W\d_]\.)?")

PUNCTUATION_CLASSES = {
    ".": "period",
    ",": "comma",
    ":": "colon",
    ";": "semicolon",
    "-": "hyphen",
    "–": "hyphen",
    "—": "hyphen",
    '"': "quote",
    "'": "quote",
    "“": "quote",
    "”": "quote",
    "‘": "quote",
    "’": "quote",
    "»": "quote",
    "«": "quote",
}

BRACKET_KINDS = (("paren", "(", ")"), ("square", "[", "]"), ("curly", "{", "}"))

CLOSERS = ")]}\"'”’»"

ABBREVIATIONS = frozenset(
    {
        "al", "ed", "eds", "vol", "vols", "no", "nos", "nr", "pp", "p", "trans", "transl",
        "etc", "univ", "proc", "conf", "dept", "jan", "feb", "mar", "apr", "jun", "jul",
        "aug", "sep", "sept", "oct", "nov", "dec", "hrsg", "hg", "bd", "aufl", "edn", "rev",
        "suppl", "ch", "chap", "fig", "repr", "diss", "dr", "st", "inc", "ltd", "co", "corp",
    }
)


class Canonical(Feature):
    """The scrubbed token, or its lowercase form when nothing survives scrubbing."""

    key = "canonical"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        return alpha or token.lower() or ABSENT


class Category(Feature):
    """Unicode categories of the first and last character."""

    key = "category"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        if not token:
            return ABSENT
        return f"{unicodedata.category(token[0])}-{unicodedata.category(token[-1])}"


class Affix(Feature):
    """Leading or trailing characters of the scrubbed token."""

    key = "affix"

    def __init__(self, size: int = 2, suffix: bool = False) -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        self.size = size
        self.suffix = suffix

    @property
    def name(self) -> str:
        return f"{'suffix' if self.suffix else 'prefix'}{self.size}"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        if not alpha:
            return ABSENT
        return alpha[-self.size:] if self.suffix else alpha[: self.size]


class Caps(Feature):
    key = "caps"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        letters = [char for char in token if char.isalpha()]
        if not letters:
            return ABSENT
        if all(char.isupper() for char in letters):
            return "upper" if len(letters) > 1 else "title"
        if letters[0].isupper() and all(not char.isupper() for char in letters[1:]):
            return "title"
        if all(char.islower() for char in letters):
            return "lower"
        return "mixed"


class Number(Feature):
    """Numeric shape: year, page range, ordinal, roman numeral and so on."""

    key = "number"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        stripped = token.strip("()[].,;:")
        if _YEAR_PATTERN.fullmatch(token) or _YEAR_PATTERN.fullmatch(stripped):
            return "year"
        if _RANGE_PATTERN.search(token):
            return "range"
        if _ORDINAL_PATTERN.fullmatch(stripped):
            return "ordinal"
        if _DIGITS_PATTERN.fullmatch(stripped):
            return "numeric"
        if any(char.isdigit() for char in token):
            return "mixed"
        if len(alpha) > 1 and _ROMAN_PATTERN.fullmatch(alpha):
            return "roman"
        return ABSENT


class Punctuation(Feature):
    """Class of the trailing punctuation mark."""

    key = "punctuation"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        stripped = token.rstrip(")]}") or token
        if not stripped:
            return ABSENT
        last = stripped[-1]
        if last in PUNCTUATION_CLASSES:
            return PUNCTUATION_CLASSES[last]
        if unicodedata.category(last).startswith("P"):
            return "other"
        return ABSENT


class Brackets(Feature):
    key = "brackets"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        for kind, opener, closer in BRACKET_KINDS:
            opens = opener in token
            closes = closer in token
            if opens and closes:
                return f"{kind}-open-close"
            if opens:
                return f"{kind}-open"
            if closes:
                return f"{kind}-close"
        return ABSENT


class Terminal(Feature):
    """Whether the token ends a sentence-like unit of the reference.

    A period after an initial or a known abbreviation is ``weak``; other
    sentence-ending marks are ``strong``.
    """

    key = "terminal"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        stripped = token.rstrip(CLOSERS) or token
        if not stripped:
            return ABSENT
        last = stripped[-1]
        if last in "?!":
            return "strong"
        if last in ":;":
            return "moderate"
        if last != ".":
            return ABSENT
        if _INITIAL_PATTERN.fullmatch(stripped.lstrip("([")):
            return "weak"
        if alpha in ABBREVIATIONS:
            return "weak"
        return "strong"


__all__ = [
    "ABBREVIATIONS",
    "Affix",
    "Brackets",
    "Canonical",
    "Caps",
    "Category",
    "Number",
    "Punctuation",
    "Terminal",
]
