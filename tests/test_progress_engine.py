"""Unit tests for workflow.services.progress_engine."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from workflow import models
from workflow.services import progress_engine
from workflow.services.progress_engine import (
    calculate_progress,
    completion_percentage,
    days_remaining,
)


class TestCalculateProgress:

    def test_no_tasks_is_zero(self):
        assert calculate_progress(0, 0) == 0

    def test_half(self):
        assert calculate_progress(1, 2) == 50

    def test_rounds_half_up(self):
        # 1/8 = 12.5 -> 13, 5/8 = 62.5 -> 63
        assert calculate_progress(1, 8) == 13
        assert calculate_progress(5, 8) == 63

    def test_rounds_down_below_half(self):
        assert calculate_progress(1, 3) == 33
        assert calculate_progress(2, 3) == 67

    def test_all_done(self):
        assert calculate_progress(7, 7) == 100


class TestDerivedValues:

    def test_days_remaining_none_without_due_date(self):
        assert days_remaining(None) is None

    def test_days_remaining_is_ceiled(self):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert days_remaining(now + timedelta(days=2, hours=1), now=now) == 3
        assert days_remaining(now + timedelta(days=2), now=now) == 2

    def test_days_remaining_negative_when_overdue(self):
        now = datetime(2030, 1, 10, tzinfo=timezone.utc)
        assert days_remaining(now - timedelta(days=3), now=now) == -3

    def test_naive_datetimes_are_utc(self):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert days_remaining(datetime(2030, 1, 2), now=now) == 1

    @pytest.mark.parametrize("status,expected", [("done", 100), ("in-progress", 50), ("todo", 0)])
    def test_completion_percentage(self, status, expected):
        assert completion_percentage(status) == expected


def _task(project_id, status):
    return models.Task(
        title=f"task {status}",
        status=status,
        assignee={"name": "Ada"},
        project_id=project_id,
    )


class TestRecomputeProgress:

    async def test_persists_progress(self, db):
        project = models.Project(title="Launch")
        db.add(project)
        await db.commit()
        db.add_all([_task(project.id, "done"), _task(project.id, "todo"), _task(project.id, "done")])
        await db.commit()

        assert await progress_engine.recompute_progress(db, project.id) == 67

        await db.refresh(project)
        assert project.progress == 67

    async def test_empty_project_resets_to_zero(self, db):
        project = models.Project(title="Empty", progress=80)
        db.add(project)
        await db.commit()

        assert await progress_engine.recompute_progress(db, project.id) == 0

    async def test_missing_project_is_a_no_op(self, db):
        assert await progress_engine.recompute_progress(db, "does-not-exist") is None

    async def test_refresh_swallows_database_errors(self, db, monkeypatch, caplog):
        async def broken(*args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(progress_engine, "recompute_progress", broken)

        assert await progress_engine.refresh_project_progress(db, "any") is None
        assert "Failed to recompute progress" in caplog.text
