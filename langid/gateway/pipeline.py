"""Classification pipeline: normalize -> fast-fail -> cache -> detector -> cache."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from starlette.concurrency import run_in_threadpool

from langid.clients.detector.base import BaseLanguageDetector
from langid.clients.detector.registry import DetectorRegistry, default_registry
from langid.config.service import ServiceConfig
from langid.core.exceptions import DetectionFailedError, EmptyInputError, NotReadyError, ValidationError
from langid.gateway.cache import LRUCache
from langid.gateway.keys import CacheKeyBuilder, ExactKeyBuilder, build_key_builder
from langid.gateway.lifecycle import NOT_READY_MESSAGE, DetectorLifecycle
from langid.gateway.types import ClassificationResponse, ClassificationResult, LanguageGuess

logger = logging.getLogger(__name__)

MAX_TOP_N = 10
EMPTY_TEXT_MESSAGE = "Empty 'text'."


class ClassificationPipeline:
    """Per-request classification over the shared detector and response cache.

    One instance is built at startup and handed to the HTTP layer; it holds
    the only references to the lifecycle, cache and key builder.

    Args:
        lifecycle: Detector readiness and handle.
        cache: Response cache (``max_size <= 0`` disables it).
        key_builder: Maps ``(top_n, text)`` to cache keys.
        min_len: Texts shorter than this get the undetermined answer without
            touching the cache or detector. 0 disables the check.
        max_input_chars: Texts are cut to this many characters after trimming.
            0 disables truncation.
    """

    def __init__(
        self,
        lifecycle: DetectorLifecycle,
        cache: LRUCache[ClassificationResponse],
        key_builder: Optional[CacheKeyBuilder] = None,
        *,
        min_len: int = 0,
        max_input_chars: int = 0,
    ) -> None:
        self.lifecycle = lifecycle
        self.cache = cache
        self.key_builder = key_builder or ExactKeyBuilder()
        self.min_len = min_len
        self.max_input_chars = max_input_chars

    def normalize(self, raw_text: Any) -> str:
        """Coerce to str, trim, truncate. Raises EmptyInputError if nothing is left."""
        text = ("" if raw_text is None else str(raw_text)).strip()
        if self.max_input_chars > 0:
            text = text[: self.max_input_chars]
        if not text:
            raise EmptyInputError(EMPTY_TEXT_MESSAGE)
        return text

    @staticmethod
    def undetermined(text: str, top_n: int) -> ClassificationResponse:
        result: ClassificationResult = LanguageGuess.undetermined() if top_n == 1 else []
        return ClassificationResponse(input_len=len(text), cld3=result)

    async def classify(self, raw_text: Any, top_n: int = 1) -> ClassificationResponse:
        if not self.lifecycle.is_ready:
            raise NotReadyError(NOT_READY_MESSAGE)
        if isinstance(top_n, bool) or not isinstance(top_n, int) or not 1 <= top_n <= MAX_TOP_N:
            raise ValidationError(f"topN must be an integer between 1 and {MAX_TOP_N}.")

        text = self.normalize(raw_text)

        if self.min_len > 0 and len(text) < self.min_len:
            return self.undetermined(text, top_n)

        key = self.key_builder.build_key(top_n, text)
        hit = self.cache.get(key)
        if hit is not None:
            return hit

        detector = self.lifecycle.detector
        result = await self._detect(detector, text, top_n)
        response = ClassificationResponse(input_len=len(text), cld3=result)
        self.cache.set(key, response)
        return response

    async def _detect(self, detector: BaseLanguageDetector, text: str, top_n: int) -> ClassificationResult:
        try:
            if top_n == 1:
                return await run_in_threadpool(detector.find_language, text)
            return await run_in_threadpool(detector.find_top_n, text, top_n)
        except Exception as exc:
            logger.error(
                "ClassificationPipeline: %s detector failed (top_n=%d, len=%d): %s",
                detector.provider, top_n, len(text), exc, exc_info=True,
            )
            raise DetectionFailedError("Language detection failed.", cause=exc) from exc

    def stats(self) -> Dict[str, Any]:
        return {
            "state": self.lifecycle.state.value,
            "detector": self.lifecycle.provider,
            "cache_key_mode": self.key_builder.mode,
            "cache": self.cache.stats(),
        }


def build_pipeline(
    config: ServiceConfig,
    *,
    registry: DetectorRegistry = default_registry,
    detector_factory: Optional[Callable[[], BaseLanguageDetector]] = None,
) -> ClassificationPipeline:
    """Wire lifecycle, cache and key builder from config.

    ``detector_factory`` replaces the registry lookup (tests inject fakes here).
    """
    if detector_factory is None:
        backend = config.detector_backend
        options = {"cld_min_bytes": config.cld_min_bytes, "cld_max_bytes": config.cld_max_bytes}

        def detector_factory() -> BaseLanguageDetector:
            return registry.build(backend, options)

    pipeline = ClassificationPipeline(
        DetectorLifecycle(detector_factory),
        LRUCache(config.cache_max),
        build_key_builder(config.cache_key_mode),
        min_len=config.min_len,
        max_input_chars=config.max_input_chars,
    )
    logger.info(
        "ClassificationPipeline: built (backend=%s, cache_max=%d, key_mode=%s, min_len=%d, max_input_chars=%d)",
        config.detector_backend, config.cache_max, config.cache_key_mode, config.min_len, config.max_input_chars,
    )
    return pipeline
