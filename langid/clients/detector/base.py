from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from langid.gateway.types import LanguageGuess


class BaseLanguageDetector(ABC):
    """A loaded language identification model.

    Implementations are synchronous and may be CPU-heavy; callers run them off
    the event loop. ``dispose()`` must tolerate being called more than once.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        ...

    @abstractmethod
    def find_language(self, text: str) -> LanguageGuess:
        """Return the single most likely language for *text*."""

    @abstractmethod
    def find_top_n(self, text: str, n: int) -> List[LanguageGuess]:
        """Return up to *n* guesses ordered by descending proportion."""

    def dispose(self) -> None:
        """Release model resources. Default implementation has nothing to free."""
