"""LLM-powered extraction of assessments and tasks from free text."""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import date
from typing import Any

from openai import APIError, OpenAI

from assessment_ai.config import settings
from assessment_ai.extraction.errors import ConfigurationError, ExtractionError
from assessment_ai.extraction.models import ExtractionBatchResult, UserContext
from assessment_ai.extraction.prompts import SYSTEM_PROMPT, build_prompt
from assessment_ai.extraction.validation import filter_and_normalize

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5

_LEADING_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")


def get_llm_client() -> OpenAI:
    """Create an OpenAI-compatible client for the configured completion service.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    if not settings.openrouter_api_key:
        raise ConfigurationError("OPENROUTER_API_KEY is not configured")

    # Failures surface to the caller immediately; retries are the caller's concern.
    return OpenAI(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
        default_headers={
            "HTTP-Referer": settings.app_url,
            "X-Title": settings.app_title,
        },
    )


def strip_code_fences(text: str) -> str:
    """Remove a leading ```` ```json ```` fence and a trailing ```` ``` ```` if present."""
    text = text.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    try:
        confidence = float(value)
    except OverflowError:
        # Integer literal too large for a float.
        return DEFAULT_CONFIDENCE
    if not math.isfinite(confidence):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, confidence))


def _coerce_clarifications(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def parse_batch_payload(text: str) -> ExtractionBatchResult:
    """Parse the model's textual reply into a validated batch.

    Args:
        text: Raw completion text, optionally wrapped in a markdown code fence.

    Returns:
        The batch with invalid candidates filtered out and defaults applied.

    Raises:
        ExtractionError: If the reply is not JSON or has no ``assessments`` list.
    """
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse AI response as JSON: %s", exc)
        raise ExtractionError("AI response was not valid JSON") from exc

    if not isinstance(data, dict) or not isinstance(data.get("assessments"), list):
        raise ExtractionError("Invalid AI response: missing assessments array")

    context_used = data.get("context_used")

    return ExtractionBatchResult(
        assessments=filter_and_normalize(data["assessments"]),
        confidence=_coerce_confidence(data.get("confidence")),
        clarifications_needed=_coerce_clarifications(data.get("clarifications_needed")),
        context_used=context_used.strip() if isinstance(context_used, str) else "",
    )


def smart_parse_assessments(
    raw_text: str,
    context: UserContext | None = None,
    *,
    today: date | None = None,
    client: OpenAI | None = None,
) -> ExtractionBatchResult:
    """Extract one or more assessments from natural-language text.

    Args:
        raw_text: The user's description of their assessments.
        context: Optional user context; an empty context is used when omitted.
        today: Anchor date for resolving relative dates (defaults to today).
        client: Pre-built completion client (a new one is created when omitted).

    Returns:
        An ExtractionBatchResult containing only well-shaped assessments.

    Raises:
        ConfigurationError: If the API key is missing.
        ExtractionError: If the service call fails or returns unusable output.
    """
    if client is None:
        client = get_llm_client()

    prompt = build_prompt(raw_text, context or UserContext(), today or date.today())

    try:
        response = client.chat.completions.create(
            model=settings.llm_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )
    except APIError as exc:
        logger.error("Completion request failed: %s", exc)
        raise ExtractionError(f"Failed to parse assessment with AI: {exc}") from exc

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        raise ExtractionError("No response content from AI")

    result = parse_batch_payload(content)
    logger.info(
        "Extracted %d assessment(s) with confidence %.2f",
        len(result.assessments),
        result.confidence,
    )
    return result
