"""CLD3 detector backed by Google's ``gcld3`` bindings (``pip install langid-gateway[cld3]``)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from langid.clients.detector.base import BaseLanguageDetector
from langid.gateway.types import UNDETERMINED, LanguageGuess

logger = logging.getLogger(__name__)


def _to_guess(result: Any) -> LanguageGuess:
    return LanguageGuess(
        language=str(result.language),
        probability=float(result.probability),
        is_reliable=bool(result.is_reliable),
        proportion=float(result.proportion),
    )


class Cld3Detector(BaseLanguageDetector):
    """Wraps a ``gcld3.NNetLanguageIdentifier``.

    ``min_num_bytes`` / ``max_num_bytes`` bound how much of the text the model
    looks at; CLD3 answers ``und`` when the text is shorter than the minimum.
    """

    def __init__(self, min_num_bytes: int = 0, max_num_bytes: int = 1000) -> None:
        import gcld3  # heavy import – deferred until the model is actually built

        self._identifier: Any = gcld3.NNetLanguageIdentifier(
            min_num_bytes=min_num_bytes,
            max_num_bytes=max_num_bytes,
        )
        self.min_num_bytes = min_num_bytes
        self.max_num_bytes = max_num_bytes
        logger.info(
            "Cld3Detector: ready",
            extra={"cld_min_bytes": min_num_bytes, "cld_max_bytes": max_num_bytes},
        )

    @property
    def provider(self) -> str:
        return "cld3"

    def _model(self) -> Any:
        if self._identifier is None:
            raise RuntimeError("Cld3Detector has been disposed")
        return self._identifier

    def find_language(self, text: str) -> LanguageGuess:
        return _to_guess(self._model().FindLanguage(text=text))

    def find_top_n(self, text: str, n: int) -> List[LanguageGuess]:
        results = self._model().FindTopNMostFreqLangs(text=text, num_langs=n)
        # CLD3 pads the list with "und" slots when fewer languages were found.
        guesses = [_to_guess(r) for r in results if r.language != UNDETERMINED]
        return guesses[:n]

    def dispose(self) -> None:
        self._identifier = None


def cld3_builder(config: Dict[str, Any]) -> BaseLanguageDetector:
    return Cld3Detector(
        min_num_bytes=int(config.get("cld_min_bytes", 0)),
        max_num_bytes=int(config.get("cld_max_bytes", 1000)),
    )
