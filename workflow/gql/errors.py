import logging
from typing import Iterator

from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from ..errors import WorkflowError

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"


def with_code(error: GraphQLError) -> GraphQLError:
    """Give every error an ``extensions.code``; hide unexpected failures."""
    original = error.original_error
    message = error.message
    extensions = dict(error.extensions or {})

    if isinstance(original, WorkflowError):
        extensions.setdefault("code", original.code)
        if original.errors:
            extensions.setdefault("errors", list(original.errors))
    elif original is None:
        # parse / schema validation problems, raised before any resolver ran
        extensions.setdefault("code", "GRAPHQL_VALIDATION_FAILED")
    else:
        logger.error("GraphQL resolver failed at %s", error.path, exc_info=original)
        message = INTERNAL_MESSAGE
        extensions["code"] = "INTERNAL_SERVER_ERROR"

    return GraphQLError(
        message,
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        original_error=original,
        extensions=extensions,
    )


class ErrorCodeExtension(SchemaExtension):

    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        if result is not None and getattr(result, "errors", None):
            result.errors = [with_code(error) for error in result.errors]
