"""Liveness, readiness and cache diagnostics."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from langid.api.dependencies import get_pipeline
from langid.api.schemas.classify import ReadinessResponse
from langid.gateway.pipeline import ClassificationPipeline

router = APIRouter(tags=["health"])


@router.get("/health", response_model=ReadinessResponse)
async def health():
    return {"ok": True}


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def ready(pipeline: ClassificationPipeline = Depends(get_pipeline)):
    if not pipeline.lifecycle.is_ready:
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"ok": False})
    return {"ok": True}


@router.get("/stats")
async def stats(pipeline: ClassificationPipeline = Depends(get_pipeline)) -> Dict[str, Any]:
    """Detector state and cache counters."""
    return pipeline.stats()
