"""Features that consult vocabularies, the term dictionary, or the token's position."""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, Optional, Tuple

from refparser.core.models import Sequence
from refparser.dictionary.base import Dictionary
from refparser.features.base import ABSENT, Feature

KEYWORDS: Tuple[Tuple[str, FrozenSet[str]], ...] = (
    ("editor", frozenset({"ed", "eds", "editor", "editors", "edited", "hrsg", "hg", "herausgeber", "dir", "coord"})),
    ("translator", frozenset({"trans", "transl", "translated", "translator", "translators", "ubers", "trad", "traduit"})),
    ("volume", frozenset({"vol", "vols", "volume", "volumes", "bd", "band", "jahrgang", "jg", "tome"})),
    ("issue", frozenset({"no", "nos", "nr", "issue", "heft", "num", "numero"})),
    ("page", frozenset({"p", "pp", "page", "pages", "seite", "seiten"})),
    ("edition", frozenset({"edn", "edition", "aufl", "auflage", "rev"})),
    ("in", frozenset({"in", "dans"})),
    ("and", frozenset({"and", "und", "et", "y", "&"})),
    ("etal", frozenset({"al", "etal"})),
    ("accessed", frozenset({"accessed", "abgerufen", "consulted", "viewed", "consulte"})),
    ("retrieved", frozenset({"retrieved", "available", "online", "url", "doi"})),
    (
        "month",
        frozenset(
            {
                "january", "february", "march", "april", "may", "june", "july", "august",
                "september", "october", "november", "december", "jan", "feb", "mar", "apr",
                "jun", "jul", "aug", "sep", "sept", "oct", "nov", "dec", "januar", "februar",
                "marz", "mai", "juni", "juli", "oktober", "dezember", "janvier", "fevrier",
                "mars", "avril", "juin", "juillet", "aout", "septembre", "octobre", "novembre",
                "decembre", "spring", "summer", "fall", "autumn", "winter",
            }
        ),
    ),
    ("press", frozenset({"press", "publisher", "publishers", "publishing", "verlag", "university", "univ", "books", "editions", "presses"})),
    ("proceedings", frozenset({"proceedings", "proc", "conference", "conf", "symposium", "workshop", "meeting", "congress", "colloquium"})),
    ("journal", frozenset({"journal", "journals", "review", "bulletin", "annals", "letters", "quarterly", "magazine", "zeitschrift", "revue"})),
    ("thesis", frozenset({"thesis", "dissertation", "diss", "phd", "doctoral", "masters", "habilitation"})),
    ("report", frozenset({"report", "rep", "memo", "memorandum", "technical", "preprint"})),
)

_DOI_PATTERN = re.compile(r"(?:^doi:?|10\.\d{4,9}/\S+)", re.IGNORECASE)
_URL_PATTERN = re.compile(r"^[(<\[]?(?:https?://|ftp://|www\.)", re.IGNORECASE)
_ISBN_PATTERN = re.compile(r"^(?:isbn(?:-1[03])?:?)?(?:97[89][-\s]?)?(?:\d[-\s]?){9}[\dxX][.,;]?$", re.IGNORECASE)
_ARXIV_PATTERN = re.compile(r"^(?:arxiv:?|\d{4}\.\d{4,5}(?:v\d+)?[.,;]?$)", re.IGNORECASE)
_PMID_PATTERN = re.compile(r"^(?:pmid:?|pmcid:?|pmc\d+)", re.IGNORECASE)


class Keyword(Feature):
    """Vocabulary class of the token (editor markers, months, venue words, ...)."""

    key = "keyword"

    def __init__(self, keywords: Optional[Tuple[Tuple[str, FrozenSet[str]], ...]] = None) -> None:
        self.lookup: Dict[str, str] = {}
        for category, words in keywords or KEYWORDS:
            for word in words:
                self.lookup.setdefault(word, category)

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        category = self.lookup.get(alpha)
        if category is None and not alpha:
            category = self.lookup.get(token.strip())
        return category or ABSENT


class Position(Feature):
    """Relative position of the token in its sequence, in tenths."""

    key = "position"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        length = len(sequence)
        if index == 0:
            return "first"
        if index >= length - 1:
            return "last"
        return str(index * 10 // length)


class Locator(Feature):
    """Identifier and link patterns: DOI, URL, ISBN, arXiv and PubMed ids."""

    key = "locator"

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        if _DOI_PATTERN.search(token):
            return "doi"
        if _URL_PATTERN.match(token):
            return "url"
        if alpha.startswith("isbn") or _ISBN_PATTERN.match(token):
            return "isbn"
        if _ARXIV_PATTERN.match(token):
            return "arxiv"
        if _PMID_PATTERN.match(token):
            return "pmid"
        return ABSENT


class DictionaryFeature(Feature):
    """Bucketed occurrence count of the scrubbed token in the term dictionary."""

    key = "dictionary"
    context_arguments = ("dictionary",)

    def __init__(self, dictionary: Optional[Dictionary] = None) -> None:
        self.dictionary = dictionary

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        if not alpha or self.dictionary is None:
            return "0"
        count = self.dictionary.get(alpha)
        if count <= 1:
            return str(count)
        return "few" if count < 10 else "many"


__all__ = ["DictionaryFeature", "KEYWORDS", "Keyword", "Locator", "Position"]
