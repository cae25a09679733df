"""Pydantic v2 schemas for the classification API."""
from __future__ import annotations

from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from langid.gateway.pipeline import MAX_TOP_N


class ClassifyRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str = Field(..., min_length=1)
    top_n: StrictInt = Field(default=1, ge=1, le=MAX_TOP_N, alias="topN")


class LanguageGuessSchema(BaseModel):
    language: str
    probability: float
    is_reliable: bool
    proportion: float


class ClassifyResponse(BaseModel):
    input_len: int = Field(..., ge=0)
    cld3: Union[LanguageGuessSchema, List[LanguageGuessSchema]]


class ReadinessResponse(BaseModel):
    ok: bool
