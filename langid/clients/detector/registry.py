"""
Detector backend registry: map backend name -> build detector from a config dict.

Builders are imported lazily so a missing optional backend (``gcld3``) only
fails when that backend is actually selected.
"""
from __future__ import annotations

from typing import Any, Callable, Dict

from langid.clients.detector.base import BaseLanguageDetector

DetectorBuilder = Callable[[Dict[str, Any]], BaseLanguageDetector]


class DetectorRegistry:
    """Maps backend id to a builder that takes a config dict and returns a detector."""

    def __init__(self) -> None:
        self._builders: Dict[str, DetectorBuilder] = {}

    def register(self, backend: str, builder: DetectorBuilder) -> None:
        self._builders[backend] = builder

    def get(self, backend: str) -> DetectorBuilder | None:
        return self._builders.get(backend)

    @property
    def names(self) -> list[str]:
        return sorted(self._builders)

    def build(self, backend: str, config: Dict[str, Any]) -> BaseLanguageDetector:
        """Build a detector. Raises KeyError for an unknown backend."""
        builder = self._builders.get(backend)
        if builder is None:
            raise KeyError(f"Unknown detector backend: {backend!r}. Registered: {self.names}")
        return builder(config)


def _cld3(config: Dict[str, Any]) -> BaseLanguageDetector:
    from langid.clients.detector.providers.cld3 import cld3_builder

    return cld3_builder(config)


def _langdetect(config: Dict[str, Any]) -> BaseLanguageDetector:
    from langid.clients.detector.providers.langdetect import langdetect_builder

    return langdetect_builder(config)


default_registry = DetectorRegistry()
default_registry.register("cld3", _cld3)
default_registry.register("langdetect", _langdetect)
