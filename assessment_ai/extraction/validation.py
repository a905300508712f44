"""Shape validation and normalization of extracted assessment candidates."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from assessment_ai.extraction.models import ExtractedAssessment, ExtractedTask

logger = logging.getLogger(__name__)


def _clean(value: Any) -> str | None:
    """Trim a string field; empty strings and non-strings become ``None``."""
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _normalize_tasks(raw_tasks: list[Any]) -> list[ExtractedTask]:
    tasks: list[ExtractedTask] = []
    for index, raw in enumerate(raw_tasks):
        title = _clean(raw.get("title")) if isinstance(raw, dict) else None
        if title is None:
            logger.warning("Skipping task %d without title: %r", index, raw)
            continue
        tasks.append(ExtractedTask(title=title, description=_clean(raw.get("description"))))
    return tasks


def filter_and_normalize(candidates: list[Any]) -> list[ExtractedAssessment]:
    """Filter raw model candidates down to well-shaped assessments.

    Candidates without a title, or whose ``tasks`` is not a list, are dropped
    and logged. Untitled tasks inside surviving candidates are dropped too.
    An empty task list is kept: completeness is checked before persistence by
    :func:`validate_parsed_assessment`, not here.

    Never raises. Input order is preserved and duplicates are kept.
    """
    assessments: list[ExtractedAssessment] = []

    for candidate in candidates:
        if not isinstance(candidate, dict):
            logger.warning("Skipping non-object assessment candidate: %r", candidate)
            continue

        title = _clean(candidate.get("title"))
        if title is None:
            logger.warning("Skipping assessment without title: %r", candidate)
            continue

        raw_tasks = candidate.get("tasks")
        if not isinstance(raw_tasks, list):
            logger.warning("Skipping assessment without tasks array: %r", candidate)
            continue

        assessments.append(
            ExtractedAssessment(
                title=title,
                subject=_clean(candidate.get("subject")),
                due_date=_clean(candidate.get("due_date")),
                description=_clean(candidate.get("description")),
                tasks=_normalize_tasks(raw_tasks),
            )
        )

    return assessments


def validate_parsed_assessment(assessment: ExtractedAssessment, today: date) -> list[str]:
    """Check an assessment is complete enough to persist.

    Args:
        assessment: A normalized assessment.
        today: Reference date; due dates before it are rejected.

    Returns:
        A list of human-readable errors (empty when valid).
    """
    errors: list[str] = []

    if not assessment.title or not assessment.title.strip():
        errors.append("Assessment title is required")

    if not assessment.tasks:
        errors.append("At least one task is required")
    else:
        for i, task in enumerate(assessment.tasks):
            if not task.title or not task.title.strip():
                errors.append(f"Task {i + 1} title is required")

    if assessment.due_date:
        try:
            due = date.fromisoformat(assessment.due_date)
        except ValueError:
            errors.append("Invalid due date format")
        else:
            if due < today:
                errors.append("Due date cannot be in the past")

    return errors
