"""Import orchestration: context -> extract -> validate, with optional fallback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, timedelta

from assessment_ai.extraction.context import get_user_context
from assessment_ai.extraction.errors import ConfigurationError, ExtractionError, FallbackExhausted
from assessment_ai.extraction.extractor import smart_parse_assessments
from assessment_ai.extraction.fallback import create_fallback_assessment
from assessment_ai.extraction.models import (
    ExtractedAssessment,
    ExtractionBatchResult,
    ImportResult,
    UserContext,
)
from assessment_ai.extraction.validation import validate_parsed_assessment

logger = logging.getLogger(__name__)

# The fallback has no model confidence; callers should rely on used_fallback.
FALLBACK_CONFIDENCE = 0.1

Extractor = Callable[..., ExtractionBatchResult]
ContextProvider = Callable[[str], UserContext]


def _with_default_due_date(
    assessment: ExtractedAssessment, today: date, default_due_days: int
) -> ExtractedAssessment:
    if assessment.due_date:
        return assessment
    return replace(assessment, due_date=(today + timedelta(days=default_due_days)).isoformat())


def fallback_import_result(
    raw_text: str,
    today: date,
    default_due_days: int,
    batch: ExtractionBatchResult | None = None,
) -> ImportResult:
    """Wrap the fallback assessment for ``raw_text`` in an ImportResult.

    Clarifications and context notes from ``batch`` are kept when a model
    reply existed.
    """
    fallback = create_fallback_assessment(raw_text)
    return ImportResult(
        assessments=[_with_default_due_date(fallback, today, default_due_days)],
        used_fallback=True,
        confidence=FALLBACK_CONFIDENCE,
        clarifications=list(batch.clarifications_needed) if batch else [],
        context_used=batch.context_used if batch else "",
    )


def _usable_assessments(batch: ExtractionBatchResult, today: date) -> list[ExtractedAssessment]:
    usable: list[ExtractedAssessment] = []
    for assessment in batch.assessments:
        errors = validate_parsed_assessment(assessment, today)
        if errors:
            logger.warning("Skipping assessment %r with validation errors: %s", assessment.title, errors)
            continue
        usable.append(assessment)
    return usable


def import_from_text(
    raw_text: str,
    user_id: str,
    allow_fallback: bool,
    *,
    today: date | None = None,
    extractor: Extractor | None = None,
    context_provider: ContextProvider | None = None,
) -> ImportResult:
    """Turn free text into assessments ready to persist.

    This is the main entry point. The text is extracted with the language
    model; if that fails or yields no valid assessment, a single generic
    fallback assessment is returned when ``allow_fallback`` is set.

    Args:
        raw_text: The user's description of their assessments.
        user_id: Authenticated user ID, used for context lookup.
        allow_fallback: Whether to synthesize a fallback on failure.
        today: Anchor date for relative dates and due-date defaults.
        extractor: Replacement for :func:`smart_parse_assessments`.
        context_provider: Replacement for :func:`get_user_context`.

    Returns:
        The ImportResult; always holds at least one assessment.

    Raises:
        FallbackExhausted: Extraction failed and ``allow_fallback`` is False.
        ConfigurationError: The LLM credential is missing and ``allow_fallback``
            is False.
    """
    today = today or date.today()
    extractor = extractor or smart_parse_assessments
    context_provider = context_provider or get_user_context

    # 1. Context
    context = context_provider(user_id)

    # 2. Extract
    batch: ExtractionBatchResult | None = None
    try:
        batch = extractor(raw_text, context, today=today)
        assessments = _usable_assessments(batch, today)
        if not assessments:
            raise ExtractionError("No valid assessments could be created from smart parsing")
    except (ExtractionError, ConfigurationError) as exc:
        # 3. Fallback decision
        if not allow_fallback:
            if isinstance(exc, ConfigurationError):
                raise
            raise FallbackExhausted(str(exc)) from exc

        logger.exception("Smart parsing failed for user %s; using fallback", user_id)
        return fallback_import_result(raw_text, today, context.default_due_days, batch)

    logger.info("Smart parsing produced %d assessment(s) for user %s", len(assessments), user_id)
    return ImportResult(
        assessments=[_with_default_due_date(a, today, context.default_due_days) for a in assessments],
        used_fallback=False,
        confidence=batch.confidence,
        clarifications=list(batch.clarifications_needed),
        context_used=batch.context_used,
    )
