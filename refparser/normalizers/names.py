"""Parse personal and corporate names into structured name dictionaries.

Each name segment may hold several names in either display order
(``John A. Smith``), sort order (``Smith, John A.``) or the compact
Vancouver form (``Smith JA``). Parsed names are dicts with ``family``,
``given``, ``particle``, ``suffix`` or, for organizations and ``et al.``,
``literal`` keys.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from refparser.core.models import Record
from refparser.core.strings import scrub
from refparser.normalizers.base import Normalizer, segments
from refparser.normalizers.text import NAME_KEYS

Name = Dict[str, str]

OTHERS: Name = {"literal": "others"}

PARTICLES = frozenset(
    {"van", "von", "de", "der", "den", "da", "di", "du", "la", "le", "del", "della", "des", "ten", "ter", "zu", "dos"}
)
SUFFIXES = frozenset({"jr", "sr", "ii", "iii", "iv"})
ORGANIZATION_WORDS = frozenset(
    {
        "agency", "association", "board", "center", "centre", "commission", "committee", "company",
        "consortium", "corporation", "council", "department", "foundation", "group", "inc", "institut",
        "institute", "ltd", "ministry", "office", "organisation", "organization", "society", "team",
        "universitat", "universite", "university",
    }
)

_EDITOR_MARKER = re.compile(
    r"\(\s*(?:eds?|editors?|hrsg|hgg?|dir|coord)\.?\s*\)"
    r"|\beds?\.(?=\s|,|$)|\beditors?\b|\bedited\s+by\b|\b(?:hrsg|hgg?)\.(?=\s|,|$)|\bherausgegeben\s+von\b",
    re.IGNORECASE,
)
_TRANSLATOR_MARKER = re.compile(
    r"\(\s*(?:trans|transl|übers)\.?\s*\)|\btrans(?:lated)?\.?\s+by\b|\btransl?\.(?=\s|,|$)|\bübers(?:etzt)?\.?\s+von\b",
    re.IGNORECASE,
)
_ETAL = re.compile(r"\bet\.?\s*al\b\.?|\bu\.\s*a\.|\band\s+others\b", re.IGNORECASE)
_SEPARATOR = re.compile(r"\s*(?:;|&|\band\b|\bund\b|\bet\b)\s*", re.IGNORECASE)
_INITIALS = re.compile(r"^(?:[A-ZÀ-Ý]\.?[\s-]*)+$")
_VANCOUVER_INITIALS = re.compile(r"^[A-ZÀ-Ý]{1,3}$")
_WORD = re.compile(r"[^\W\d_]+")


def _is_suffix(value: str) -> bool:
    return value.strip(" .,").lower() in SUFFIXES


def _is_organization(value: str) -> bool:
    return any(scrub(word) in ORGANIZATION_WORDS for word in _WORD.findall(value))


def _format_initials(value: str) -> str:
    return " ".join(f"{char}." for char in value)


def _split_particle(words: List[str]) -> Tuple[Optional[str], List[str]]:
    particle = []
    rest = list(words)
    while len(rest) > 1 and rest[0].lower() in PARTICLES:
        particle.append(rest.pop(0))
    return (" ".join(particle) or None), rest


def _name(family: str, given: Optional[str] = None, particle: Optional[str] = None, suffix: Optional[str] = None) -> Name:
    name: Name = {"family": family}
    if given:
        name["given"] = given
    if particle:
        name["particle"] = particle
    if suffix:
        name["suffix"] = suffix
    return name


def parse_display_name(value: str) -> Optional[Name]:
    """Parse ``John A. van Smith Jr.`` or ``Smith JA``."""

    words = value.split()
    if not words:
        return None

    suffix = None
    if len(words) > 1 and _is_suffix(words[-1]):
        suffix = words.pop()

    if len(words) == 1:
        return _name(words[0], suffix=suffix)

    if _VANCOUVER_INITIALS.match(words[-1]) and not words[0].isupper():
        return _name(" ".join(words[:-1]), _format_initials(words[-1]), suffix=suffix)

    for idx in range(1, len(words) - 1):
        if words[idx].lower() in PARTICLES:
            particle, family = _split_particle(words[idx:])
            return _name(" ".join(family), " ".join(words[:idx]), particle, suffix)

    return _name(words[-1], " ".join(words[:-1]), suffix=suffix)


def parse_sort_name(family: str, given: str, suffix: Optional[str] = None) -> Name:
    """Parse a ``Family, Given`` pair."""

    particle, words = _split_particle(family.split())
    return _name(" ".join(words), given.strip() or None, particle, suffix)


def _is_display_list(parts: List[str]) -> bool:
    return len(parts) > 1 and all(
        len(part.split()) > 1
        and not _INITIALS.match(part)
        and part.split()[0].lower() not in PARTICLES
        and not _VANCOUVER_INITIALS.match(part.split()[-1])
        for part in parts
    )


def _is_vancouver_list(parts: List[str]) -> bool:
    return len(parts) > 1 and all(
        len(part.split()) > 1 and _VANCOUVER_INITIALS.match(part.split()[-1]) for part in parts
    )


def parse_names(value: str) -> List[Name]:
    """Split a name segment into individual names."""

    names: List[Name] = []
    for chunk in _SEPARATOR.split(value):
        chunk = chunk.strip(" ,;")
        if not chunk:
            continue

        parts = [part.strip() for part in chunk.split(",") if part.strip()]
        if len(parts) == 1 or _is_display_list(parts) or _is_vancouver_list(parts):
            names.extend(name for name in map(parse_display_name, parts) if name)
            continue

        idx = 0
        while idx < len(parts):
            family = parts[idx]
            given = parts[idx + 1] if idx + 1 < len(parts) else ""
            if given and _is_suffix(given):
                names.append(parse_display_name(f"{family} {given}") or {"literal": family})
                idx += 2
                continue
            suffix = None
            if idx + 2 < len(parts) and _is_suffix(parts[idx + 2]):
                suffix = parts[idx + 2]
            if given:
                names.append(parse_sort_name(family, given, suffix))
            else:
                name = parse_display_name(family)
                if name:
                    names.append(name)
            idx += 3 if suffix else 2
    return names


class Names(Normalizer):
    """Turn name segments into lists of name dicts.

    Editor markers in ``author`` move those names to ``editor`` when the
    record has no editors of its own.
    """

    key = "names"

    def normalize(self, record: Record) -> Record:
        if "author" in record and "editor" not in record:
            authors = segments(record, "author")
            if any(isinstance(value, str) and _EDITOR_MARKER.search(value) for value in authors):
                record["editor"] = record.pop("author")

        for key in NAME_KEYS:
            if key not in record:
                continue
            parsed: List[Name] = []
            others = False
            for value in segments(record, key):
                if not isinstance(value, str):
                    parsed.append(value)
                    continue
                value = _TRANSLATOR_MARKER.sub(" ", _EDITOR_MARKER.sub(" ", value))
                value, count = _ETAL.subn(" ", value)
                others = others or bool(count)
                value = value.strip(" ,;:")
                if not value:
                    continue
                if _is_organization(value) and "," not in value:
                    parsed.append({"literal": value})
                else:
                    parsed.extend(parse_names(value))
            if others:
                parsed.append(dict(OTHERS))
            if parsed:
                record[key] = parsed
            else:
                del record[key]
        return record


__all__ = ["Names", "OTHERS", "parse_display_name", "parse_names", "parse_sort_name"]
