"""Output encodings for normalized records."""

from typing import Any, Callable, Dict, List

from refparser.core.models import Record

from .bibtex import format_bibtex
from .csl import format_citeproc, format_csl


def format_hash(records: List[Record]) -> List[Record]:
    return records


# Record formatters by name; ``wapiti`` output is the labeled dataset itself.
FORMATTERS: Dict[str, Callable[[List[Record]], Any]] = {
    "bibtex": format_bibtex,
    "citeproc": format_citeproc,
    "csl": format_csl,
    "hash": format_hash,
}

__all__ = ["FORMATTERS", "format_bibtex", "format_citeproc", "format_csl", "format_hash"]
