"""langid FastAPI application entry point.

Start with:
    python -m langid
or, letting uvicorn own signal handling:
    uvicorn langid.api.main:app --host 0.0.0.0 --port 7860 --proxy-headers

The detector loads in the background after startup; until it is ready
/ready and /classify answer 503.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from langid.api.middleware import access_log_middleware, body_limit_middleware, security_headers_middleware
from langid.api.routers import classify, health
from langid.clients.detector.base import BaseLanguageDetector
from langid.clients.detector.registry import DetectorRegistry, default_registry
from langid.config.service import ServiceConfig, load_service_config
from langid.core.exceptions import ProjectError
from langid.gateway.pipeline import build_pipeline

logger = logging.getLogger(__name__)

# Responses smaller than this are sent uncompressed.
GZIP_MIN_SIZE = 1024


async def project_error_handler(request: Request, exc: ProjectError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("API: %s on %s %s", exc.code, request.method, request.url.path)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body.", "details": details},
    )


def create_app(
    config: Optional[ServiceConfig] = None,
    *,
    registry: DetectorRegistry = default_registry,
    detector_factory: Optional[Callable[[], BaseLanguageDetector]] = None,
    wait_for_detector: bool = False,
) -> FastAPI:
    """Build the application and its pipeline.

    ``wait_for_detector`` makes startup block until the detector is loaded
    instead of loading it in the background.
    """
    config = config or load_service_config()
    pipeline = build_pipeline(config, registry=registry, detector_factory=detector_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ── Startup ──────────────────────────────────────────────────
        if wait_for_detector:
            await pipeline.lifecycle.initialize()
        else:
            pipeline.lifecycle.start()
        logger.info("API: accepting requests (detector state: %s)", pipeline.lifecycle.state.value)

        yield

        # ── Shutdown ─────────────────────────────────────────────────
        pipeline.lifecycle.dispose()
        logger.info("API: detector released")

    app = FastAPI(
        title="langid gateway",
        version="1.0.0",
        description="Text language identification with a cached CLD3 front end.",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.pipeline = pipeline

    app.add_exception_handler(ProjectError, project_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Middleware added last runs first.
    app.middleware("http")(body_limit_middleware(config.body_limit))

    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[config.rate_limit] if config.rate_limit_enabled else [],
        enabled=config.rate_limit_enabled,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    if config.rate_limit_enabled:
        app.add_middleware(SlowAPIMiddleware)
        logger.info("API: rate limit %s per client", config.rate_limit)

    app.middleware("http")(security_headers_middleware)
    if config.log_requests:
        app.middleware("http")(access_log_middleware)
    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MIN_SIZE)

    app.include_router(health.router)
    app.include_router(classify.router)
    return app


app = create_app()
