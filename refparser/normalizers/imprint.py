"""Normalizers for place of publication and publisher segments."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from refparser.core.models import Record
from refparser.normalizers.base import Normalizer, segments

_IMPRINT = re.compile(r"^(?P<location>[^:]{2,}?)\s*:\s*(?P<publisher>\S.*)$")
_PUBLISHER_PREFIX = re.compile(
    r"^(?:published\s+by|publisher\s*:|verlag\s*:|publi[ée]\s+par|[ée]diteur\s*:)\s*",
    re.IGNORECASE,
)


def split_imprint(value: str) -> Tuple[Optional[str], str]:
    """Split ``"Location: Publisher"`` into its two parts.

    Values without a colon come back as ``(None, value)``.
    """

    match = _IMPRINT.match(value.strip())
    if not match:
        return None, value.strip()
    return match.group("location").strip(), match.group("publisher").strip()


class Location(Normalizer):
    key = "location"

    def normalize(self, record: Record) -> Record:
        if "location" not in record or "publisher" in record:
            return record

        locations = []
        publishers = []
        for value in segments(record, "location"):
            if not isinstance(value, str):
                locations.append(value)
                continue
            location, publisher = split_imprint(value)
            if location is None:
                locations.append(value)
            else:
                locations.append(location)
                publishers.append(publisher)

        record["location"] = locations
        if publishers:
            record["publisher"] = publishers
        return record


class Publisher(Normalizer):
    """Strip publisher prefixes and pull a leading place into ``location``."""

    key = "publisher"

    def normalize(self, record: Record) -> Record:
        if "publisher" not in record:
            return record

        self.map_values(record, ("publisher",), lambda value: _PUBLISHER_PREFIX.sub("", value.strip()))
        if "location" in record or "publisher" not in record:
            return record

        publishers = []
        locations = []
        for value in segments(record, "publisher"):
            if isinstance(value, str):
                location, value = split_imprint(value)
                if location:
                    locations.append(location)
            publishers.append(value)

        record["publisher"] = publishers
        if locations:
            record["location"] = locations
        return record


__all__ = ["Location", "Publisher", "split_imprint"]
