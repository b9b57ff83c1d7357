"""Normalizers for DOIs, URLs, ISBNs and PubMed identifiers."""

from __future__ import annotations

import re
from typing import List, Optional

from refparser.core.models import Record
from refparser.normalizers.base import Normalizer, segments

_DOI = re.compile(r"10\.\d{4,9}/[^\s\"<>]+")
_DOI_URL = re.compile(r"^(?:https?://)?(?:dx\.)?doi\.org/", re.IGNORECASE)
_URL_PREFIX = re.compile(
    r"^(?:retrieved\s+(?:on\s+[^,]*,\s*)?from|available\s+(?:at|from|online\s+at)|url\s*:|online\s*:|abgerufen\s+von)\s*",
    re.IGNORECASE,
)
_URL = re.compile(r"(?:https?|ftp)://\S+|www\.\S+", re.IGNORECASE)
_ISBN_CHARS = re.compile(r"[^0-9Xx]")

_PMID = re.compile(r"\bPMID\s*:?\s*(\d+)", re.IGNORECASE)
_PMCID = re.compile(r"\bPMCID\s*:?\s*(PMC\d+)|\b(PMC\d+)\b", re.IGNORECASE)
_PUBMED_URL = re.compile(r"(?:ncbi\.nlm\.nih\.gov/pubmed|pubmed\.ncbi\.nlm\.nih\.gov)/(\d+)", re.IGNORECASE)
_PMC_URL = re.compile(r"ncbi\.nlm\.nih\.gov/pmc/articles/(PMC\d+)", re.IGNORECASE)


def extract_doi(value: str) -> Optional[str]:
    match = _DOI.search(value)
    if not match:
        return None
    return match.group(0).rstrip(".,;)]")


def clean_url(value: str) -> str:
    value = _URL_PREFIX.sub("", value.strip()).strip("<> ")
    match = _URL.search(value)
    return match.group(0).rstrip(".,;>)") if match else value


def clean_isbn(value: str) -> Optional[str]:
    """Return the digits (and check character) of an ISBN-10 or ISBN-13."""

    digits = _ISBN_CHARS.sub("", value.upper().replace("ISBN", ""))
    return digits if len(digits) in (10, 13) else None


def _append(record: Record, key: str, value: str) -> None:
    values = segments(record, key)
    if value not in values:
        values.append(value)
    record[key] = values


class Locator(Normalizer):
    """Extract DOIs and tidy URL and ISBN segments.

    DOIs found in ``url`` segments (``https://doi.org/...``) move to ``doi``.
    """

    key = "locator"

    def normalize(self, record: Record) -> Record:
        if "doi" in record:
            self.map_values(record, ("doi",), lambda value: extract_doi(value) or value.strip())

        if "url" in record:
            urls: List[str] = []
            for value in segments(record, "url"):
                if not isinstance(value, str):
                    urls.append(value)
                    continue
                url = clean_url(value)
                doi = extract_doi(url) if _DOI_URL.match(url) or url.lower().startswith("doi:") else None
                if doi:
                    _append(record, "doi", doi)
                elif url:
                    urls.append(url)
            if urls:
                record["url"] = urls
            else:
                del record["url"]

        if "isbn" in record:
            self.map_values(record, ("isbn",), lambda value: clean_isbn(value) or value.strip())
        return record


class PubMed(Normalizer):
    """Pull PubMed and PubMed Central identifiers out of notes and URLs."""

    key = "pubmed"

    SOURCES = ("note", "url", "pmid", "pmcid")

    def normalize(self, record: Record) -> Record:
        pmids: List[str] = []
        pmcids: List[str] = []
        for key in self.SOURCES:
            for value in segments(record, key):
                if not isinstance(value, str):
                    continue
                pmid = _PMID.search(value) or _PUBMED_URL.search(value)
                if pmid:
                    pmids.append(pmid.group(1))
                elif key == "pmid" and value.strip().isdigit():
                    pmids.append(value.strip())
                pmcid = _PMC_URL.search(value) or _PMCID.search(value)
                if pmcid:
                    pmcids.append(next(group for group in pmcid.groups() if group).upper())

        if pmids:
            record["pmid"] = list(dict.fromkeys(pmids))
        if pmcids:
            record["pmcid"] = list(dict.fromkeys(pmcids))
        return record


__all__ = ["Locator", "PubMed", "clean_isbn", "clean_url", "extract_doi"]
