"""Pure-Python detector backed by ``langdetect`` (port of Google's language-detection).

langdetect reports one probability per language and nothing else, so it is
mapped onto the CLD3 record shape: ``proportion`` mirrors ``probability`` and
``is_reliable`` uses CLD3's own reliability cut-off.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from langdetect import DetectorFactory, detect_langs
from langdetect.detector_factory import init_factory
from langdetect.lang_detect_exception import LangDetectException

from langid.clients.detector.base import BaseLanguageDetector
from langid.gateway.types import LanguageGuess

logger = logging.getLogger(__name__)

# Deterministic output; must be set before the first detection.
DetectorFactory.seed = 0

RELIABILITY_THRESHOLD = 0.7


class LangdetectDetector(BaseLanguageDetector):
    def __init__(self) -> None:
        # Loads the language profiles now instead of on the first request.
        init_factory()
        logger.info("LangdetectDetector: profiles loaded")

    @property
    def provider(self) -> str:
        return "langdetect"

    def _detect(self, text: str) -> List[LanguageGuess]:
        try:
            langs = detect_langs(text)
        except LangDetectException:
            # Raised for text without any usable features (digits, punctuation).
            return []
        return [
            LanguageGuess(
                language=lang.lang,
                probability=float(lang.prob),
                is_reliable=float(lang.prob) >= RELIABILITY_THRESHOLD,
                proportion=float(lang.prob),
            )
            for lang in langs
        ]

    def find_language(self, text: str) -> LanguageGuess:
        guesses = self._detect(text)
        return guesses[0] if guesses else LanguageGuess.undetermined()

    def find_top_n(self, text: str, n: int) -> List[LanguageGuess]:
        return self._detect(text)[:n]


def langdetect_builder(config: Dict[str, Any]) -> BaseLanguageDetector:
    return LangdetectDetector()
