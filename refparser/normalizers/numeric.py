"""Normalizers for page ranges, dates and volume/issue numbers."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from refparser.core.models import Record
from refparser.core.strings import scrub
from refparser.normalizers.base import Normalizer, segments

EN_DASH = "–"

MONTHS = {
    "jan": 1, "january": 1, "januar": 1, "janvier": 1, "janner": 1,
    "feb": 2, "february": 2, "februar": 2, "fevrier": 2,
    "mar": 3, "march": 3, "marz": 3, "mars": 3,
    "apr": 4, "april": 4, "avril": 4,
    "may": 5, "mai": 5,
    "jun": 6, "june": 6, "juni": 6, "juin": 6,
    "jul": 7, "july": 7, "juli": 7, "juillet": 7,
    "aug": 8, "august": 8, "aout": 8,
    "sep": 9, "sept": 9, "september": 9, "septembre": 9,
    "oct": 10, "october": 10, "okt": 10, "oktober": 10, "octobre": 10,
    "nov": 11, "november": 11, "novembre": 11,
    "dec": 12, "december": 12, "dez": 12, "dezember": 12, "decembre": 12,
}

_PAGE_PREFIX = re.compile(r"^(?:pages?|seiten?|pp?\.?|s\.)\s*", re.IGNORECASE)
_PAGE_RANGE = re.compile(r"(?<=\w)\s*[-‐-―]+\s*(?=\w)")
_YEAR = re.compile(r"(?<!\d)(1[5-9]\d\d|20\d\d)(?!\d)")
_ISO_DATE = re.compile(r"(?<!\d)(1[5-9]\d\d|20\d\d)-(\d{1,2})(?:-(\d{1,2}))?(?!\d)")
_DMY_NUMERIC = re.compile(r"(?<!\d)(\d{1,2})[./](\d{1,2})[./](1[5-9]\d\d|20\d\d)(?!\d)")
_WORD = re.compile(r"[^\W\d_]+", re.UNICODE)
_DAY = re.compile(r"(?<!\d)(\d{1,2})(?:st|nd|rd|th|\.)?(?!\d)")

_VOLUME_PREFIX = re.compile(r"^(?:volumes?|vols?\.?|band|bd\.?|jg\.?|tome|t\.)\s*", re.IGNORECASE)
_VOLUME_PARENS = re.compile(r"^(?P<volume>[\w.\-–]+?)\s*\((?P<issue>[^)]+)\)$")
_VOLUME_ISSUE = re.compile(
    r"^(?P<volume>[\w.\-–]+?)\s*[,:;.]?\s*(?:number|num\.?|nos\.?|no\.?|nr\.?|issue|heft|h\.)\s*(?P<issue>[\w\-–/]+)$",
    re.IGNORECASE,
)
_VOLUME_SLASH = re.compile(r"^(?P<volume>\d+)\s*/\s*(?P<issue>\d+(?:[-–]\d+)?)$")
_ISSUE_PREFIX = re.compile(r"^(?:number|num\.?|nos\.?|no\.?|nr\.?|issue|heft|h\.)\s*", re.IGNORECASE)
_YEAR_ONLY = re.compile(r"^(1[5-9]\d\d|20\d\d)$")


class Page(Normalizer):
    """Remove page markers and use an en dash in ranges."""

    key = "page"

    def normalize(self, record: Record) -> Record:
        self.map_values(record, ("pages",), self.clean)
        return record

    @staticmethod
    def clean(value: str) -> str:
        value = _PAGE_PREFIX.sub("", value.strip())
        return _PAGE_RANGE.sub(EN_DASH, value)


def _format_date(year: int, month: Optional[int] = None, day: Optional[int] = None) -> str:
    if month is None or not 1 <= month <= 12:
        return f"{year:04d}"
    if day is None or not 1 <= day <= 31:
        return f"{year:04d}-{month:02d}"
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date(value: str) -> Optional[str]:
    """Return an ISO-style date (``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``) or ``None``."""

    match = _ISO_DATE.search(value)
    if match:
        day = int(match.group(3)) if match.group(3) else None
        return _format_date(int(match.group(1)), int(match.group(2)), day)

    match = _DMY_NUMERIC.search(value)
    if match:
        return _format_date(int(match.group(3)), int(match.group(2)), int(match.group(1)))

    match = _YEAR.search(value)
    if not match:
        return None
    year = int(match.group(1))

    month = None
    for word in _WORD.findall(value):
        month = MONTHS.get(scrub(word))
        if month:
            break
    if month is None:
        return _format_date(year)

    remainder = value[: match.start()] + " " + value[match.end():]
    days = [int(day) for day in _DAY.findall(remainder) if 1 <= int(day) <= 31]
    return _format_date(year, month, days[0] if len(days) == 1 else None)


class Date(Normalizer):
    """Reduce date segments to ISO-style dates when a year can be found."""

    key = "date"

    def normalize(self, record: Record) -> Record:
        self.map_values(record, ("date",), lambda value: parse_date(value) or value)
        return record


def split_volume(value: str) -> Tuple[str, Optional[str]]:
    """Split a volume segment into ``(volume, issue)``."""

    value = _VOLUME_PREFIX.sub("", value.strip())
    for pattern in (_VOLUME_PARENS, _VOLUME_ISSUE, _VOLUME_SLASH):
        match = pattern.match(value)
        if match:
            return match.group("volume").strip(" .,"), match.group("issue").strip(" .,")
    return value, None


class Volume(Normalizer):
    """Separate issue numbers from volumes and move stray years to ``date``."""

    key = "volume"

    def normalize(self, record: Record) -> Record:
        if "issue" in record:
            self.map_values(record, ("issue",), lambda value: _ISSUE_PREFIX.sub("", value.strip()))

        if "volume" not in record:
            return record

        volumes: List[str] = []
        issues: List[str] = segments(record, "issue")
        for value in segments(record, "volume"):
            if not isinstance(value, str):
                volumes.append(value)
                continue
            volume, issue = split_volume(value)
            if issue and _YEAR_ONLY.match(issue):
                if "date" not in record:
                    record["date"] = [issue]
                issue = None
            if volume:
                volumes.append(volume)
            if issue and issue not in issues:
                issues.append(issue)

        if volumes:
            record["volume"] = volumes
        else:
            del record["volume"]
        if issues:
            record["issue"] = issues
        return record


__all__ = ["Date", "MONTHS", "Page", "Volume", "parse_date", "split_volume"]
