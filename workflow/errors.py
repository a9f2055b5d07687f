from typing import List, Optional


class WorkflowError(Exception):
    """Base class for errors that map onto an API response."""
    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(WorkflowError):
    status_code = 400
    code = "BAD_USER_INPUT"
    default_message = "Validation failed"


class NotFoundError(WorkflowError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class ProjectReferenceError(NotFoundError):
    """A task points at a project that does not exist."""

    def __init__(self):
        super().__init__("Project")


class InternalError(WorkflowError):
    """The user sees the generic message; the detail is only logged."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__()
