"""Tests for user context lookup and Supabase storage helpers."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch

from postgrest.exceptions import APIError

from assessment_ai.extraction.context import get_user_context
from assessment_ai.extraction.models import ExtractedAssessment, ExtractedTask, UserContext
from assessment_ai.storage import fetch_recent_subjects, store_assessment, store_import


def _subjects_client(rows: list[dict[str, Any]]) -> MagicMock:
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value
    query.order.return_value.limit.return_value.execute.return_value.data = rows
    return client


def _tables_client(tables: dict[str, MagicMock]) -> MagicMock:
    client = MagicMock()
    client.table.side_effect = lambda name: tables[name]
    return client


# ---------------------------------------------------------------------------
# Context provider
# ---------------------------------------------------------------------------


class TestGetUserContext:
    def test_recent_subjects_deduplicated_in_order(self) -> None:
        client = _subjects_client(
            [
                {"subject": "Biology"},
                {"subject": " biology "},
                {"subject": "History"},
                {"subject": ""},
                {"subject": None},
            ]
        )

        context = get_user_context("user-1", client)

        assert context.recent_subjects == ["Biology", "History"]
        assert context.current_semester == "Current"
        assert context.default_due_days == 14

    def test_lookup_failure_returns_defaults(self) -> None:
        client = MagicMock()
        client.table.side_effect = RuntimeError("connection refused")

        assert get_user_context("user-1", client) == UserContext()

    @patch("assessment_ai.extraction.context.get_supabase_client")
    def test_missing_supabase_config_returns_defaults(self, mock_get_client: MagicMock) -> None:
        mock_get_client.side_effect = Exception("supabase_url is required")

        context = get_user_context("user-1")

        assert context.recent_subjects == []
        assert context.current_semester == "Current"
        assert context.default_due_days == 14


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class TestFetchRecentSubjects:
    def test_queries_user_assessments_newest_first(self) -> None:
        client = _subjects_client([{"subject": "Math"}, {"subject": None}])

        assert fetch_recent_subjects(client, "user-1", 5) == ["Math"]

        client.table.assert_called_once_with("assessments")
        select = client.table.return_value.select
        select.assert_called_once_with("subject")
        select.return_value.eq.assert_called_once_with("user_id", "user-1")
        eq = select.return_value.eq.return_value
        eq.order.assert_called_once_with("created_at", desc=True)
        eq.order.return_value.limit.assert_called_once_with(5)


class TestStoreAssessment:
    def _assessment(self) -> ExtractedAssessment:
        return ExtractedAssessment(
            title="Essay",
            due_date="2026-10-30",
            tasks=[ExtractedTask(title="Outline"), ExtractedTask(title="Draft", description="1000 words")],
        )

    def test_inserts_assessment_and_tasks(self) -> None:
        assessments = MagicMock()
        assessments.insert.return_value.execute.return_value.data = [{"id": "a1", "title": "Essay"}]
        tasks = MagicMock()
        tasks.insert.return_value.execute.return_value.data = [{"id": "t1"}, {"id": "t2"}]
        client = _tables_client({"assessments": assessments, "tasks": tasks})

        row, task_rows = store_assessment(client, "user-1", self._assessment())

        assert row == {"id": "a1", "title": "Essay"}
        assert task_rows == [{"id": "t1"}, {"id": "t2"}]

        inserted = assessments.insert.call_args.args[0]
        assert inserted["subject"] == "General"
        assert inserted["progress"] == 0
        assert inserted["user_id"] == "user-1"

        inserted_tasks = tasks.insert.call_args.args[0]
        assert [t["title"] for t in inserted_tasks] == ["Outline", "Draft"]
        assert all(t["assessment_id"] == "a1" and t["completed"] is False for t in inserted_tasks)

    def test_task_failure_keeps_assessment(self) -> None:
        assessments = MagicMock()
        assessments.insert.return_value.execute.return_value.data = [{"id": "a1"}]
        tasks = MagicMock()
        tasks.insert.return_value.execute.side_effect = APIError({"message": "rls violation"})
        client = _tables_client({"assessments": assessments, "tasks": tasks})

        row, task_rows = store_assessment(client, "user-1", self._assessment())

        assert row == {"id": "a1"}
        assert task_rows == []


class TestStoreImport:
    @patch("assessment_ai.storage.store_assessment")
    def test_skips_failed_inserts(self, mock_store: MagicMock) -> None:
        mock_store.side_effect = [
            APIError({"message": "duplicate"}),
            ({"id": "a2"}, [{"id": "t1"}]),
        ]

        created, tasks = store_import(
            MagicMock(),
            "user-1",
            [ExtractedAssessment(title="One"), ExtractedAssessment(title="Two")],
        )

        assert created == [{"id": "a2"}]
        assert tasks == [{"id": "t1"}]
