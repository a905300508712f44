"""Prompt templates for natural-language assessment extraction."""

from __future__ import annotations

from datetime import date, timedelta

from assessment_ai.extraction.models import UserContext

SYSTEM_PROMPT = (
    "You are an intelligent academic assessment planner that excels at "
    "understanding natural language and extracting structured assessment data. "
    "Always return valid JSON only."
)

OUTPUT_FORMAT = """{
  "assessments": [
    {
      "title": "Assessment title",
      "subject": "Subject name (inferred if needed)",
      "due_date": "YYYY-MM-DD (calculated from relative terms)",
      "description": "Brief description",
      "tasks": [
        {"title": "Task title", "description": "Task details"}
      ]
    }
  ],
  "confidence": 0.8,
  "clarifications_needed": ["Any unclear items"],
  "context_used": "What context helped fill gaps"
}"""


def _next_weekday(today: date, weekday: int) -> date:
    """Return the first date on or after ``today`` falling on ``weekday`` (Mon=0)."""
    return today + timedelta(days=(weekday - today.weekday()) % 7)


def build_context_section(context: UserContext, today: date) -> str:
    recent = ", ".join(context.recent_subjects) or "None"
    return (
        f"Today's date: {today.isoformat()} ({today.strftime('%A')})\n"
        "\n"
        "User context (advisory only; ignore it when it does not fit the text):\n"
        f"- Recent subjects: {recent}\n"
        f"- Current semester: {context.current_semester}\n"
        f"- Default due days when no date is given: {context.default_due_days}"
    )


def build_prompt(raw_text: str, context: UserContext, today: date) -> str:
    """Build the user prompt for assessment extraction.

    ``today`` is the only date anchor; relative phrases in ``raw_text`` are to
    be resolved against it.
    """
    friday = _next_weekday(today, 4)
    next_week = today + timedelta(days=7)

    return f"""You are an intelligent academic assessment planner that can understand natural language and extract multiple assessments from freeform text.

{build_context_section(context, today)}

Analyze this text and extract ALL assessments mentioned:
\"\"\"{raw_text}\"\"\"

Capabilities:
- Handle natural language ("I have a science report due next week about cells")
- Parse multiple assessments in one message
- Infer missing information using context
- Convert relative dates to exact dates
- Recognize subjects from content
- Generate appropriate tasks when not specified

Rules:
1. Return ONLY valid JSON, no extra text
2. Extract EVERY assessment mentioned, even implied ones
3. Use context to fill missing subjects, due dates, etc.
4. Convert "next week", "in two weeks", "Friday" to exact dates (YYYY-MM-DD) counted from today's date
5. Generate 3-5 logical tasks for assessments without explicit tasks
6. Set confidence score based on clarity of input (0.1-1.0)
7. List clarifications needed if information is ambiguous

Return this structure:
{OUTPUT_FORMAT}

Examples of input handling:
- "Math homework due Friday" -> due_date = "{friday.isoformat()}"
- "Science report about cells" -> subject = "Science", generate research tasks
- "Essay and presentation next week" -> create two separate assessments due around {next_week.isoformat()}
- "Same subject as before" -> use from recent subjects context"""
