from langid.clients.detector.base import BaseLanguageDetector
from langid.clients.detector.registry import DetectorRegistry, default_registry

__all__ = ["BaseLanguageDetector", "DetectorRegistry", "default_registry"]
