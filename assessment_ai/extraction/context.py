"""User context lookup used to disambiguate extraction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assessment_ai.config import settings
from assessment_ai.extraction.models import UserContext
from assessment_ai.storage import fetch_recent_subjects, get_supabase_client

if TYPE_CHECKING:
    from supabase import Client

logger = logging.getLogger(__name__)


def get_user_context(user_id: str, client: Client | None = None) -> UserContext:
    """Build the extraction context for a user. Never raises.

    Recent subjects come from the user's latest assessments, deduplicated
    case-insensitively in most-recent-first order. Any lookup failure yields
    the default context so the import can always proceed.
    """
    try:
        if client is None:
            client = get_supabase_client()
        subjects = fetch_recent_subjects(client, user_id, settings.recent_subjects_limit)
    except Exception:
        logger.warning("Context lookup failed for user %s; using defaults", user_id, exc_info=True)
        return UserContext()

    seen: set[str] = set()
    recent: list[str] = []
    for subject in subjects:
        name = subject.strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            recent.append(name)

    return UserContext(
        recent_subjects=recent,
        current_semester=settings.current_semester,
        default_due_days=settings.default_due_days,
    )
