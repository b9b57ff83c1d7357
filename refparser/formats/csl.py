"""CSL-JSON rendering of normalized records.

``csl`` items carry dates as EDTF strings (``"2001-05"``), ``citeproc``
items use the ``date-parts`` structure expected by citeproc processors.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from refparser.core.models import Record
from refparser.formats.bibtex import citation_key

RENAMED = {
    "date": "issued",
    "pages": "page",
    "location": "publisher-place",
    "journal": "container-title",
    "doi": "DOI",
    "url": "URL",
    "isbn": "ISBN",
    "pmid": "PMID",
    "pmcid": "PMCID",
}

TYPES = {"article": "article-journal"}

NAME_KEYS = ("author", "editor", "translator", "director")
IDENTIFIER_KEYS = ("doi", "url", "isbn", "pmid", "pmcid")

_DATE = re.compile(r"^(\d{4})(?:-(\d{2}))?(?:-(\d{2}))?$")


def date_parts(value: str) -> Optional[List[int]]:
    match = _DATE.match(value.strip())
    if not match:
        return None
    return [int(part) for part in match.groups() if part]


def _scalar(key: str, values: Any) -> Any:
    if isinstance(values, str):
        return values
    if key in IDENTIFIER_KEYS:
        return values[0]
    return " ".join(str(value) for value in values)


def to_csl(record: Record, key: str, *, date_format: str = "edtf") -> Dict[str, Any]:
    item: Dict[str, Any] = {"id": key}
    for field, values in record.items():
        if not values:
            continue
        if field == "type":
            item["type"] = TYPES.get(values, values)
        elif field in NAME_KEYS:
            item[field] = [dict(name) for name in values if isinstance(name, dict)]
        elif field == "date":
            date = values if isinstance(values, str) else values[0]
            parts = date_parts(date)
            if date_format == "citeproc":
                item["issued"] = {"date-parts": [parts]} if parts else {"literal": date}
            else:
                item["issued"] = date
        elif field == "journal" and "container-title" in record:
            continue
        else:
            item[RENAMED.get(field, field)] = _scalar(field, values)
    return item


def _items(records: List[Record], date_format: str) -> List[Dict[str, Any]]:
    taken: set = set()
    return [to_csl(record, citation_key(record, taken), date_format=date_format) for record in records]


def format_csl(records: List[Record]) -> List[Dict[str, Any]]:
    return _items(records, "edtf")


def format_citeproc(records: List[Record]) -> List[Dict[str, Any]]:
    return _items(records, "citeproc")


__all__ = ["date_parts", "format_citeproc", "format_csl", "to_csl"]
