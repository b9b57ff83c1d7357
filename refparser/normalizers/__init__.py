"""Field normalizers applied to labeled records, in cascade order."""

from .base import (
    NORMALIZER_REGISTRY,
    CascadeOutcome,
    NormalizationCascade,
    Normalizer,
    StageResult,
    build_normalizer,
)
from .imprint import Location, Publisher
from .language import Language, detect_language
from .locators import Locator, PubMed
from .names import Names
from .numeric import Date, Page, Volume
from .text import Container, Punctuation, Quotes
from .type import Type, classify

# The type classifier must stay last.
DEFAULT_NORMALIZERS = (
    "quotes",
    "punctuation",
    "container",
    "page",
    "date",
    "volume",
    "location",
    "locator",
    "publisher",
    "pubmed",
    "names",
    "language",
    "type",
)

__all__ = [
    "CascadeOutcome",
    "Container",
    "DEFAULT_NORMALIZERS",
    "Date",
    "Language",
    "Location",
    "Locator",
    "NORMALIZER_REGISTRY",
    "Names",
    "NormalizationCascade",
    "Normalizer",
    "Page",
    "PubMed",
    "Publisher",
    "Punctuation",
    "Quotes",
    "StageResult",
    "Type",
    "Volume",
    "build_normalizer",
    "classify",
    "detect_language",
]
