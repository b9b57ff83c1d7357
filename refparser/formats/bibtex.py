"""BibTeX rendering of normalized records."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Set

from refparser.core.models import Record
from refparser.core.strings import scrub, transliterate

TYPES = {
    "article": "article",
    "book": "book",
    "chapter": "incollection",
    "paper-conference": "inproceedings",
    "thesis": "phdthesis",
    "report": "techreport",
}

FIELDS = {
    "title": "title",
    "edition": "edition",
    "volume": "volume",
    "issue": "number",
    "location": "address",
    "doi": "doi",
    "url": "url",
    "isbn": "isbn",
    "note": "note",
    "genre": "type",
    "medium": "howpublished",
    "pmid": "pmid",
    "pmcid": "pmcid",
}

NAME_FIELDS = ("author", "editor", "translator")
VERBATIM_FIELDS = NAME_FIELDS + ("doi", "url")

_SPECIAL = re.compile(r"(?<!\\)([&%#])")
_YEAR = re.compile(r"\d{4}")


def _escape(value: str) -> str:
    return _SPECIAL.sub(r"\\\1", value)


def format_name(name: Dict[str, str]) -> str:
    """Render a name dict as ``Family, Given`` (``{Literal}`` for organizations)."""

    if "literal" in name:
        return "others" if name["literal"] == "others" else "{%s}" % name["literal"]
    family = " ".join(part for part in (name.get("particle"), name.get("family")) if part)
    parts = [family]
    if name.get("suffix"):
        parts.append(name["suffix"])
    if name.get("given"):
        parts.append(name["given"])
    return ", ".join(parts)


def format_names(names: Iterable) -> str:
    return " and ".join(format_name(name) if isinstance(name, dict) else str(name) for name in names)


def _first(record: Record, key: str) -> Optional[str]:
    values = record.get(key)
    if not values:
        return None
    if isinstance(values, str):
        return values
    return str(values[0])


def _join(values) -> str:
    if isinstance(values, str):
        return values
    return " ".join(str(value) for value in values)


def citation_key(record: Record, taken: Set[str]) -> str:
    """Build a key from the first family name and year, unique within *taken*."""

    family = ""
    for name in record.get("author") or record.get("editor") or []:
        if isinstance(name, dict):
            family = name.get("family") or name.get("literal") or ""
            break
    base = scrub(transliterate(family)) or "ref"
    date = _first(record, "date") or ""
    match = _YEAR.search(date)
    base += match.group(0) if match else ""

    key = base
    suffix = ord("a")
    while key in taken:
        key = f"{base}{chr(suffix)}"
        suffix += 1
    taken.add(key)
    return key


def entry_fields(record: Record, entry_type: str) -> Dict[str, str]:
    fields: Dict[str, str] = {}

    for key in NAME_FIELDS:
        if record.get(key):
            fields[key] = format_names(record[key])

    for key, field in FIELDS.items():
        if record.get(key):
            fields[field] = _join(record[key])

    if record.get("journal"):
        fields["journal"] = _join(record["journal"])
    if record.get("container-title"):
        target = "journal" if entry_type == "article" and "journal" not in fields else "booktitle"
        fields[target] = _join(record["container-title"])

    if record.get("pages"):
        fields["pages"] = _join(record["pages"]).replace("–", "--")

    date = _first(record, "date")
    if date:
        year = _YEAR.search(date)
        fields["year"] = year.group(0) if year else date
        month = re.match(r"\d{4}-(\d{2})", date)
        if month:
            fields["month"] = str(int(month.group(1)))

    if record.get("publisher"):
        publisher_field = {"phdthesis": "school", "techreport": "institution"}.get(entry_type, "publisher")
        fields[publisher_field] = _join(record["publisher"])
    return fields


def format_entry(record: Record, key: str) -> str:
    entry_type = TYPES.get(record.get("type") or "", "misc")
    fields = entry_fields(record, entry_type)
    lines = []
    for field in sorted(fields):
        value = fields[field] if field in VERBATIM_FIELDS else _escape(fields[field])
        lines.append(f"  {field} = {{{value}}}")
    return "@%s{%s,\n%s\n}" % (entry_type, key, ",\n".join(lines))


def format_bibtex(records: List[Record]) -> str:
    """Render *records* as a BibTeX bibliography."""

    taken: Set[str] = set()
    return "\n\n".join(format_entry(record, citation_key(record, taken)) for record in records)


__all__ = ["TYPES", "citation_key", "format_bibtex", "format_entry", "format_name", "format_names"]
