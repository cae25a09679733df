"""FastAPI dependency providers."""
from __future__ import annotations

from fastapi import HTTPException, Request, status

from langid.gateway.pipeline import ClassificationPipeline


def get_pipeline(request: Request) -> ClassificationPipeline:
    """The pipeline built by create_app() and kept on app.state."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Classification pipeline not initialised. Check server startup logs.",
        )
    return pipeline
