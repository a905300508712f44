"""Supabase storage helpers for assessments and tasks."""

from __future__ import annotations

import logging
from typing import Any, cast

from postgrest.exceptions import APIError
from supabase import Client, create_client

from assessment_ai.config import settings
from assessment_ai.extraction.fallback import DEFAULT_SUBJECT
from assessment_ai.extraction.models import ExtractedAssessment

logger = logging.getLogger(__name__)


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(settings.supabase_url, settings.supabase_key)


def fetch_recent_subjects(client: Client, user_id: str, limit: int) -> list[str]:
    """Return the subject column of the user's most recent assessments (newest first)."""
    result = (
        client.table("assessments")
        .select("subject")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    rows = cast(list[dict[str, Any]], result.data)
    return [row["subject"] for row in rows if isinstance(row.get("subject"), str)]


def store_assessment(
    client: Client,
    user_id: str,
    assessment: ExtractedAssessment,
) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Insert one assessment and its tasks.

    Returns:
        The inserted assessment row and the inserted task rows. A failed
        task insert is logged and yields an empty task list.
    """
    result = (
        client.table("assessments")
        .insert(
            {
                "title": assessment.title,
                "subject": assessment.subject or DEFAULT_SUBJECT,
                "description": assessment.description,
                "due_date": assessment.due_date,
                "progress": 0,
                "user_id": user_id,
            }
        )
        .execute()
    )
    row = cast(list[dict[str, Any]], result.data)[0]

    task_rows = [
        {
            "assessment_id": row["id"],
            "title": task.title,
            "description": task.description,
            "completed": False,
            "user_id": user_id,
        }
        for task in assessment.tasks
    ]
    if not task_rows:
        return row, []

    try:
        tasks_result = client.table("tasks").insert(task_rows).execute()
    except APIError:
        logger.exception("Task creation failed for assessment %s", row["id"])
        return row, []

    return row, cast(list[dict[str, Any]], tasks_result.data)


def store_import(
    client: Client,
    user_id: str,
    assessments: list[ExtractedAssessment],
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Store every assessment of an import, skipping the ones that fail to insert.

    Returns:
        ``(created_assessments, created_tasks)``.
    """
    created: list[dict[str, Any]] = []
    created_tasks: list[dict[str, Any]] = []

    for assessment in assessments:
        try:
            row, tasks = store_assessment(client, user_id, assessment)
        except (APIError, IndexError):
            logger.exception("Assessment creation failed: %s", assessment.title)
            continue
        created.append(row)
        created_tasks.extend(tasks)

    return created, created_tasks
