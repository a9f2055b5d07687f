"""Validation messages shared by the REST and GraphQL surfaces."""

from datetime import datetime, timedelta, timezone

import pytest

from workflow import schemas
from workflow.errors import ValidationError
from workflow.validation import field_label, format_error, validate_payload


def _messages(model, payload):
    with pytest.raises(ValidationError) as exc_info:
        validate_payload(model, payload)
    return exc_info.value.errors


class TestFieldLabel:

    def test_body_prefix_is_dropped(self):
        assert field_label(("body", "title")) == "Title"

    def test_nested_names(self):
        assert field_label(("body", "team", 0, "name")) == "Team member name"
        assert field_label(("assignee", "name")) == "Assignee name"

    def test_unknown_field_keeps_its_name(self):
        assert field_label(("body", "colour")) == "colour"


class TestProjectValidation:

    def test_title_required(self):
        assert _messages(schemas.ProjectCreate, {}) == ["Title is required"]

    def test_blank_title_is_missing(self):
        assert _messages(schemas.ProjectCreate, {"title": "   "}) == ["Title is required"]

    def test_lengths(self):
        messages = _messages(schemas.ProjectCreate, {"title": "x" * 101, "description": "y" * 501})
        assert messages == [
            "Title cannot be more than 100 characters",
            "Description cannot be more than 500 characters",
        ]

    def test_status_enum(self):
        messages = _messages(schemas.ProjectCreate, {"title": "A", "status": "paused"})
        assert len(messages) == 1
        assert messages[0].startswith("Status must be")
        assert "on-hold" in messages[0]

    def test_progress_bounds(self):
        assert _messages(schemas.ProjectCreate, {"title": "A", "progress": 101}) == [
            "Progress cannot be more than 100"
        ]
        assert _messages(schemas.ProjectCreate, {"title": "A", "progress": -1}) == [
            "Progress cannot be less than 0"
        ]

    def test_due_date_must_be_future(self):
        past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
        assert _messages(schemas.ProjectCreate, {"title": "A", "dueDate": past}) == [
            "Due date must be in the future"
        ]

    def test_team_member_name_required(self):
        assert _messages(schemas.ProjectCreate, {"title": "A", "team": [{"avatar": "a.png"}]}) == [
            "Team member name is required"
        ]

    def test_unknown_field_rejected(self):
        assert _messages(schemas.ProjectCreate, {"title": "A", "owner": "me"}) == ['"owner" is not allowed']

    def test_defaults(self):
        project = validate_payload(schemas.ProjectCreate, {"title": "  Launch  "})
        assert project.title == "Launch"
        assert project.status == "planning"
        assert project.progress == 0
        assert project.team == []

    def test_update_accepts_empty_payload(self):
        update = validate_payload(schemas.ProjectUpdate, {})
        assert update.model_dump(exclude_unset=True) == {}


class TestTaskValidation:

    def test_required_fields_in_order(self):
        assert _messages(schemas.TaskCreate, {}) == [
            "Task title is required",
            "Assignee is required",
            "Project ID is required",
        ]

    def test_blank_task_title(self):
        payload = {"title": "   ", "assignee": {"name": "Ada"}, "projectId": "p1"}
        assert _messages(schemas.TaskCreate, payload) == ["Task title is required"]

    def test_long_task_title_uses_plain_label(self):
        payload = {"title": "x" * 101, "assignee": {"name": "Ada"}, "projectId": "p1"}
        assert _messages(schemas.TaskCreate, payload) == ["Title cannot be more than 100 characters"]

    def test_hours_cannot_be_negative(self):
        payload = {
            "title": "A",
            "assignee": {"name": "Ada"},
            "projectId": "p1",
            "estimatedHours": -2,
            "actualHours": -1,
        }
        assert _messages(schemas.TaskCreate, payload) == [
            "Estimated hours cannot be negative",
            "Actual hours cannot be negative",
        ]

    def test_tags_are_trimmed_and_unique(self):
        task = validate_payload(schemas.TaskCreate, {
            "title": "A",
            "assignee": {"name": "Ada"},
            "projectId": "p1",
            "tags": [" ui ", "ui", "backend", ""],
        })
        assert task.tags == ["ui", "backend"]

    def test_update_rejects_project_change(self):
        assert _messages(schemas.TaskUpdate, {"projectId": "other"}) == ['"projectId" is not allowed']

    def test_snake_case_names_accepted(self):
        task = validate_payload(schemas.TaskCreate, {
            "title": "A",
            "assignee": {"name": "Ada"},
            "project_id": "p1",
            "status": "in-progress",
        })
        assert task.project_id == "p1"
        assert task.status == "in-progress"


def test_fallback_message_keeps_parser_text():
    message = format_error({"type": "int_parsing", "loc": ("body", "progress"), "msg": "Input should be a valid integer"})
    assert message == "Progress: Input should be a valid integer"
