"""Pydantic request/response schemas for the assessment import API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ParseAssessmentRequest(BaseModel):
    """Request body for POST /api/ai/parse-assessment."""

    text: str
    use_fallback: bool = False


class ParseAssessmentResponse(BaseModel):
    """Response body for POST /api/ai/parse-assessment.

    ``assessments`` and ``tasks`` are the rows created in the database.
    """

    success: bool = True
    assessments: list[dict[str, Any]]
    tasks: list[dict[str, Any]] = []
    used_fallback: bool
    confidence: float
    clarifications_needed: list[str] = []
    context_used: str = ""
    message: str
