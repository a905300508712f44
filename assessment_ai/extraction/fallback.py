"""Deterministic fallback used when AI extraction is unusable."""

from __future__ import annotations

from assessment_ai.extraction.models import ExtractedAssessment, ExtractedTask

DEFAULT_TITLE = "Imported Assessment"
DEFAULT_SUBJECT = "General"
MAX_TITLE_CHARS = 50
MAX_DESCRIPTION_CHARS = 200

FALLBACK_TASK_TITLES = (
    "Review imported plan",
    "Break down into smaller tasks",
    "Set timeline and milestones",
)


def create_fallback_assessment(raw_text: str) -> ExtractedAssessment:
    """Build a single generic assessment from raw text. Never raises.

    The title is the first non-blank line (shortened to 47 characters plus
    ``"..."`` when longer than 50), the description is the first 200
    characters of the text, and three scaffold tasks are attached.
    """
    first_line = next((line.strip() for line in raw_text.splitlines() if line.strip()), "")
    title = first_line or DEFAULT_TITLE
    if len(title) > MAX_TITLE_CHARS:
        title = title[: MAX_TITLE_CHARS - 3] + "..."

    description: str | None = None
    if raw_text.strip():
        description = raw_text[:MAX_DESCRIPTION_CHARS]
        if len(raw_text) > MAX_DESCRIPTION_CHARS:
            description += "..."

    return ExtractedAssessment(
        title=title,
        subject=DEFAULT_SUBJECT,
        description=description,
        tasks=[ExtractedTask(title=t) for t in FALLBACK_TASK_TITLES],
    )
