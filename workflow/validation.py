"""
Turns pydantic error lists into the human readable messages returned in the
``errors`` array of a 400 response. Shared by the REST request validation
handler and the GraphQL input conversion.
"""
from typing import Any, Dict, Iterable, List, Sequence, Type, TypeVar

import pydantic
from pydantic import BaseModel

from .errors import ValidationError

M = TypeVar("M", bound=BaseModel)

FIELD_LABELS = {
    "title": "Title",
    "description": "Description",
    "status": "Status",
    "priority": "Priority",
    "progress": "Progress",
    "team": "Team",
    "assignee": "Assignee",
    "name": "Name",
    "avatar": "Avatar",
    "projectId": "Project ID",
    "project_id": "Project ID",
    "dueDate": "Due date",
    "due_date": "Due date",
    "estimatedHours": "Estimated hours",
    "estimated_hours": "Estimated hours",
    "actualHours": "Actual hours",
    "actual_hours": "Actual hours",
    "tags": "Tags",
    "body": "Request body",
}

NESTED_NAME_LABELS = {
    "team": "Team member name",
    "assignee": "Assignee name",
}

NON_NEGATIVE_FIELDS = {"estimatedHours", "estimated_hours", "actualHours", "actual_hours"}


def _field_path(loc: Sequence[Any]) -> List[str]:
    path = [part for part in loc if isinstance(part, str)]
    if path and path[0] in ("body", "query", "path") and len(path) > 1:
        path = path[1:]
    return path


def field_label(loc: Sequence[Any]) -> str:
    path = _field_path(loc)
    if not path:
        return "Value"
    field = path[-1]
    if field == "name" and len(path) > 1 and path[-2] in NESTED_NAME_LABELS:
        return NESTED_NAME_LABELS[path[-2]]
    return FIELD_LABELS.get(field, field)


def format_error(error: Dict[str, Any]) -> str:
    loc = error.get("loc", ())
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    label = field_label(loc)
    path = _field_path(loc)
    field = path[-1] if path else ""

    if kind == "missing" or kind == "string_too_short":
        return f"{label} is required"
    if kind == "string_too_long":
        return f"{label} cannot be more than {ctx.get('max_length')} characters"
    if kind == "enum":
        return f"{label} must be {ctx.get('expected')}"
    if kind == "greater_than_equal":
        if field in NON_NEGATIVE_FIELDS and ctx.get("ge") == 0:
            return f"{label} cannot be negative"
        return f"{label} cannot be less than {ctx.get('ge')}"
    if kind == "less_than_equal":
        return f"{label} cannot be more than {ctx.get('le')}"
    if kind == "extra_forbidden":
        return f'"{field}" is not allowed'
    if kind.startswith("workflow_"):
        # raised by our own validators with a final message
        return error.get("msg", "")
    return f"{label}: {error.get('msg', 'Invalid value')}"


def format_errors(errors: Iterable[Dict[str, Any]]) -> List[str]:
    return [format_error(error) for error in errors]


def validate_payload(model: Type[M], payload: Dict[str, Any]) -> M:
    """Validate a plain dict (GraphQL input) with the same rules as the REST body."""
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(errors=format_errors(exc.errors())) from exc
