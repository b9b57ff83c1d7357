"""Terminal normalizer assigning a CSL item type to a record."""

from __future__ import annotations

import re
from typing import Callable, Optional, Tuple

from refparser.core.models import Record
from refparser.normalizers.base import Normalizer

Predicate = Callable[[Record], bool]
Classifier = Callable[[Record], Optional[str]]

_CONFERENCE = re.compile(r"proceedings|proc\.|conference|meeting|symposi(?:on|um)", re.IGNORECASE)

GENRES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"ph(?:\.\s*)?d|diss(?:\.|ertation)|thesis", re.IGNORECASE), "thesis"),
    (re.compile(r"rep(?:\.|ort)", re.IGNORECASE), "report"),
    (re.compile(r"unpublished|manuscript", re.IGNORECASE), "manuscript"),
    (re.compile(r"patent", re.IGNORECASE), "patent"),
    (re.compile(r"personal communication", re.IGNORECASE), "personal_communication"),
    (re.compile(r"interview", re.IGNORECASE), "interview"),
    (re.compile(r"web|online|en ligne"), "webpage"),
)

MEDIA: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"dvd|video|vhs|motion", re.IGNORECASE), "motion_picture"),
    (re.compile(r"television", re.IGNORECASE), "broadcast"),
)


def _text(record: Record, key: str) -> str:
    values = record.get(key) or []
    if isinstance(values, str):
        return values
    return " ".join(str(value) for value in values)


def _has(key: str) -> Predicate:
    return lambda record: key in record


def _match_table(key: str, table: Tuple[Tuple[re.Pattern, str], ...]) -> Classifier:
    def classify(record: Record) -> Optional[str]:
        text = _text(record, key)
        for pattern, item_type in table:
            if pattern.search(text):
                return item_type
        return None

    return classify


def _container(record: Record) -> str:
    return "paper-conference" if _CONFERENCE.search(_text(record, "container-title")) else "chapter"


# First matching predicate wins. A classifier returning None leaves the type unset.
RULES: Tuple[Tuple[Predicate, Classifier], ...] = (
    (_has("journal"), lambda record: "article"),
    (_has("container-title"), _container),
    (_has("genre"), _match_table("genre", GENRES)),
    (_has("medium"), _match_table("medium", MEDIA)),
    (_has("publisher"), lambda record: "book"),
)


def classify(record: Record) -> Optional[str]:
    """Return the item type for *record*, or ``None`` when no rule decides one."""

    for predicate, classifier in RULES:
        if predicate(record):
            return classifier(record)
    return None


class Type(Normalizer):
    """Replace ``type`` with the classified item type, or drop it when unclassified."""

    key = "type"

    def normalize(self, record: Record) -> Record:
        item_type = classify(record)
        if item_type:
            record["type"] = item_type
        else:
            record.pop("type", None)
        return record


__all__ = ["GENRES", "MEDIA", "RULES", "Type", "classify"]
