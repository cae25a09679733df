"""Classify router: language identification for a piece of text."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from langid.api.dependencies import get_pipeline
from langid.api.schemas.classify import ClassifyRequest, ClassifyResponse
from langid.gateway.pipeline import ClassificationPipeline

router = APIRouter(tags=["classify"])


def _error_example(message: str) -> dict:
    return {"content": {"application/json": {"example": {"error": message}}}}


@router.post(
    "/classify",
    response_model=ClassifyResponse,
    responses={
        400: _error_example("Empty 'text'."),
        500: _error_example("Language detection failed."),
        503: _error_example("Detector not ready yet."),
    },
)
async def classify(
    body: ClassifyRequest,
    pipeline: ClassificationPipeline = Depends(get_pipeline),
):
    # NotReadyError / EmptyInputError / DetectionFailedError are rendered by the
    # ProjectError handler registered in create_app().
    response = await pipeline.classify(body.text, body.top_n)
    return JSONResponse(response.to_dict())
