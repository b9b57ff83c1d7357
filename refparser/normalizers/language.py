"""Normalizer detecting the language a reference is written in."""

from __future__ import annotations

import logging
from typing import Optional

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

from refparser.core.models import Record
from refparser.normalizers.base import Normalizer, segments

logger = logging.getLogger(__name__)

# Detection is probabilistic; a fixed seed keeps results reproducible.
DetectorFactory.seed = 0

TEXT_KEYS = ("title", "container-title", "journal", "publisher", "location")
MAX_TEXT_LENGTH = 1000


def detect_language(text: str, *, threshold: float = 0.8) -> Optional[str]:
    """Return the ISO 639-1 code of *text*, or ``None`` below ``threshold``."""

    text = " ".join(text.split())[:MAX_TEXT_LENGTH]
    if not any(char.isalpha() for char in text):
        return None
    try:
        candidates = detect_langs(text)
    except LangDetectException as exc:
        logger.debug("Language detection failed for %r: %s", text[:80], exc)
        return None
    if not candidates or candidates[0].prob < threshold:
        return None
    return candidates[0].lang


class Language(Normalizer):
    """Set ``language`` from titles and imprint unless the record has one."""

    key = "language"

    def __init__(self, *, skip: bool = False, threshold: float = 0.8) -> None:
        super().__init__(skip=skip)
        self.threshold = threshold

    def normalize(self, record: Record) -> Record:
        if "language" in record:
            return record
        text = " ".join(
            value for key in TEXT_KEYS for value in segments(record, key) if isinstance(value, str)
        )
        language = detect_language(text, threshold=self.threshold)
        if language:
            record["language"] = language
        return record


__all__ = ["Language", "detect_language"]
