"""Data models for natural-language assessment extraction."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ExtractedTask:
    """A single task belonging to an extracted assessment."""

    title: str
    description: str | None = None


@dataclass
class ExtractedAssessment:
    """An assessment (exam, essay, report...) extracted from free text."""

    title: str
    subject: str | None = None
    due_date: str | None = None  # ISO YYYY-MM-DD
    description: str | None = None
    tasks: list[ExtractedTask] = field(default_factory=list)


@dataclass
class ExtractionBatchResult:
    """Validated output of one extraction call."""

    assessments: list[ExtractedAssessment]
    confidence: float = 0.5
    clarifications_needed: list[str] = field(default_factory=list)
    context_used: str = ""


@dataclass(frozen=True)
class UserContext:
    """Per-user hints used to disambiguate extraction.

    Defaults are the safe context used when no history is available.
    """

    recent_subjects: list[str] = field(default_factory=list)
    current_semester: str = "Current"
    default_due_days: int = 14


@dataclass
class ImportResult:
    """Outcome of :func:`import_from_text`."""

    assessments: list[ExtractedAssessment]
    used_fallback: bool
    confidence: float
    clarifications: list[str] = field(default_factory=list)
    context_used: str = ""
