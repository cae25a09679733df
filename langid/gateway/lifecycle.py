"""Detector lifecycle: load once in the background, serve, dispose once."""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Optional

from langid.clients.detector.base import BaseLanguageDetector
from langid.core.exceptions import NotReadyError
from langid.gateway.types import ReadinessState

logger = logging.getLogger(__name__)

NOT_READY_MESSAGE = "Detector not ready yet."


class DetectorLifecycle:
    """Owns the process-wide detector handle.

    ``uninitialized -> initializing -> ready -> disposed``. A load error moves
    to ``failed`` and is not retried; the service then stays not-ready and the
    error is kept in ``init_error`` for diagnostics.
    """

    def __init__(self, factory: Callable[[], BaseLanguageDetector]) -> None:
        self._factory = factory
        self._detector: Optional[BaseLanguageDetector] = None
        self._state = ReadinessState.UNINITIALIZED
        self._dispose_lock = threading.Lock()
        self._disposed = False
        self._init_task: Optional[asyncio.Task] = None
        self.init_error: Optional[BaseException] = None

    @property
    def state(self) -> ReadinessState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ReadinessState.READY

    @property
    def provider(self) -> Optional[str]:
        return self._detector.provider if self._detector is not None else None

    @property
    def detector(self) -> BaseLanguageDetector:
        """The live handle. Raises NotReadyError unless the state is ``ready``."""
        if self._state is not ReadinessState.READY or self._detector is None:
            raise NotReadyError(NOT_READY_MESSAGE)
        return self._detector

    async def initialize(self) -> None:
        """Build the detector off the event loop. Only the first call does anything."""
        if self._state is not ReadinessState.UNINITIALIZED:
            return
        self._state = ReadinessState.INITIALIZING
        logger.info("DetectorLifecycle: initializing detector")
        try:
            detector = await asyncio.to_thread(self._factory)
        except Exception as exc:
            self.init_error = exc
            if not self._disposed:
                self._state = ReadinessState.FAILED
            logger.error("DetectorLifecycle: detector failed to initialize: %s", exc, exc_info=True)
            return
        if self._disposed:
            # Shutdown arrived while the model was loading.
            _dispose_quietly(detector)
            return
        self._detector = detector
        self._state = ReadinessState.READY
        logger.info("DetectorLifecycle: detector ready (%s)", detector.provider)

    def start(self) -> asyncio.Task:
        """Schedule initialize() on the running loop; requests are rejected until it completes."""
        if self._init_task is None:
            self._init_task = asyncio.get_running_loop().create_task(self.initialize())
        return self._init_task

    async def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait for a scheduled initialization to finish. Returns is_ready."""
        if self._init_task is not None:
            await asyncio.wait_for(asyncio.shield(self._init_task), timeout)
        return self.is_ready

    def dispose(self) -> None:
        """Release the detector. Safe to call any number of times, from any thread."""
        with self._dispose_lock:
            if self._disposed:
                return
            self._disposed = True
            detector, self._detector = self._detector, None
            self._state = ReadinessState.DISPOSED
        if detector is not None:
            _dispose_quietly(detector)
            logger.info("DetectorLifecycle: detector disposed")


def _dispose_quietly(detector: BaseLanguageDetector) -> None:
    try:
        detector.dispose()
    except Exception as exc:
        logger.warning("DetectorLifecycle: dispose failed (ignored): %s", exc)
