"""AI import endpoint: turn free text into stored assessments and tasks."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from assessment_ai.api.models import ParseAssessmentRequest, ParseAssessmentResponse
from assessment_ai.config import settings
from assessment_ai.extraction.errors import ConfigurationError, FallbackExhausted
from assessment_ai.extraction.importer import fallback_import_result, import_from_text
from assessment_ai.storage import get_supabase_client, store_import

logger = logging.getLogger(__name__)

router = APIRouter()


def get_current_user_id(authorization: Annotated[str | None, Header()] = None) -> str:
    """Resolve the caller's user ID from a Supabase access token."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Unauthorized: Please sign in to use AI import")

    try:
        response = get_supabase_client().auth.get_user(token.strip())
    except Exception as exc:
        logger.warning("Authentication failed: %s", exc)
        raise HTTPException(
            status_code=401, detail="Unauthorized: Please sign in to use AI import"
        ) from exc

    if response is None or response.user is None:
        raise HTTPException(status_code=401, detail="Unauthorized: Please sign in to use AI import")
    return str(response.user.id)


@router.get("/api/ai/parse-assessment")
async def parse_assessment_info() -> dict[str, str]:
    return {"message": "AI Assessment Parser API - Use POST to parse assessment text"}


@router.post("/api/ai/parse-assessment", response_model=ParseAssessmentResponse)
def parse_assessment(
    req: ParseAssessmentRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ParseAssessmentResponse:
    """Extract assessments from free text and store them for the caller.

    With ``use_fallback`` set, unparseable text still produces one generic
    assessment, also when none of the extracted assessments could be stored;
    otherwise extraction failures return 422.
    """
    text = req.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Please provide the text to parse")
    if len(text) > settings.max_import_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Text exceeds {settings.max_import_chars} characters",
        )

    try:
        result = import_from_text(text, user_id, allow_fallback=req.use_fallback)
    except FallbackExhausted as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "error": (
                    "AI parsing failed. The text might be unclear "
                    "or the AI service is unavailable."
                ),
                "details": str(exc),
            },
        ) from exc
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=f"LLM unavailable: {exc}") from exc

    client = get_supabase_client()
    created, tasks = store_import(client, user_id, result.assessments)
    if not created and not result.used_fallback and req.use_fallback:
        logger.warning("No assessments could be stored for user %s; storing fallback", user_id)
        result = replace(
            fallback_import_result(text, date.today(), settings.default_due_days),
            clarifications=result.clarifications,
            context_used=result.context_used,
        )
        created, tasks = store_import(client, user_id, result.assessments)
    if not created:
        raise HTTPException(status_code=500, detail="Failed to create assessments")

    if result.used_fallback:
        message = f"Created {len(created)} assessment(s) using fallback parsing"
    else:
        message = f"Successfully created {len(created)} assessment(s) from natural language"

    return ParseAssessmentResponse(
        assessments=created,
        tasks=tasks,
        used_fallback=result.used_fallback,
        confidence=result.confidence,
        clarifications_needed=result.clarifications,
        context_used=result.context_used,
        message=message,
    )
