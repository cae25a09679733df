"""Shared test doubles."""
from __future__ import annotations

import asyncio
import threading
from typing import List, Optional

from langid.clients.detector.base import BaseLanguageDetector
from langid.gateway.types import LanguageGuess

POLISH = LanguageGuess(language="pl", probability=0.98, is_reliable=True, proportion=1.0)
RANKED = [
    LanguageGuess(language="en", probability=0.91, is_reliable=True, proportion=0.6),
    LanguageGuess(language="de", probability=0.85, is_reliable=True, proportion=0.3),
    LanguageGuess(language="fr", probability=0.7, is_reliable=True, proportion=0.1),
    LanguageGuess(language="es", probability=0.6, is_reliable=False, proportion=0.05),
]


def _run(coro):
    return asyncio.run(coro)


class FakeDetector(BaseLanguageDetector):
    """Counts calls; answers with fixed guesses or raises ``error``."""

    def __init__(
        self,
        single: LanguageGuess = POLISH,
        ranked: Optional[List[LanguageGuess]] = None,
        *,
        error: Optional[Exception] = None,
        dispose_error: Optional[Exception] = None,
    ) -> None:
        self.single = single
        self.ranked = list(RANKED if ranked is None else ranked)
        self.error = error
        self.dispose_error = dispose_error
        self.single_calls: List[str] = []
        self.top_n_calls: List[tuple] = []
        self.dispose_calls = 0

    @property
    def provider(self) -> str:
        return "fake"

    @property
    def calls(self) -> int:
        return len(self.single_calls) + len(self.top_n_calls)

    def find_language(self, text: str) -> LanguageGuess:
        self.single_calls.append(text)
        if self.error is not None:
            raise self.error
        return self.single

    def find_top_n(self, text: str, n: int) -> List[LanguageGuess]:
        self.top_n_calls.append((text, n))
        if self.error is not None:
            raise self.error
        return self.ranked[:n]

    def dispose(self) -> None:
        self.dispose_calls += 1
        if self.dispose_error is not None:
            raise self.dispose_error


class GatedFactory:
    """Detector factory that blocks until ``release()`` is called."""

    def __init__(self, detector: Optional[BaseLanguageDetector] = None) -> None:
        self.detector = detector or FakeDetector()
        self._gate = threading.Event()
        self.calls = 0

    def release(self) -> None:
        self._gate.set()

    def __call__(self) -> BaseLanguageDetector:
        self.calls += 1
        if not self._gate.wait(timeout=10):
            raise TimeoutError("GatedFactory was never released")
        return self.detector
