"""Schema lookup helpers shared by the rules."""

from collections.abc import Hashable, Iterable
from typing import TypeVar

from api_diff.parser.base import Operation, SchemaNode

T = TypeVar("T", bound=Hashable)

JSON_MEDIA_TYPE = "application/json"


def json_request_schema(op: Operation) -> SchemaNode | None:
    """Return the application/json request body schema, if any."""
    if op.request_body is None:
        return None
    return op.request_body.content.get(JSON_MEDIA_TYPE)


def request_body_required(op: Operation) -> bool:
    return op.request_body is not None and op.request_body.required


def success_response(op: Operation) -> tuple[str, SchemaNode | None] | None:
    """Return (status code, JSON schema) of the first declared 2xx response.

    Declaration order decides which 2xx response is used, not numeric order.
    """
    for status_code, response in op.responses.items():
        if status_code.startswith("2"):
            return status_code, response.content.get(JSON_MEDIA_TYPE)
    return None


def escape_pointer_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def json_pointer(*tokens: str) -> str:
    """Build an RFC 6901 JSON pointer from raw tokens."""
    return "".join("/" + escape_pointer_token(t) for t in tokens)


def unique(values: Iterable[T]) -> list[T]:
    """Drop repeated values, keeping first-seen order."""
    seen: set[T] = set()
    result: list[T] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result
