"""Endpoint index: the (method, path) inventory of a document."""

from typing import NamedTuple

from api_diff.parser.base import Document, Operation

HTTP_METHODS = ("GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "PATCH", "TRACE")


class Endpoint(NamedTuple):
    method: str  # upper case, one of HTTP_METHODS
    path: str
    operation: Operation

    @property
    def key(self) -> tuple[str, str]:
        return (self.method, self.path)

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


def build_endpoint_index(doc: Document) -> tuple[Endpoint, ...]:
    """Collect the endpoints of a document in declaration order.

    Verbs outside HTTP_METHODS are skipped. When the same (method, path)
    is declared twice (e.g. ``get`` and ``GET``), the first one wins.
    """
    seen: set[tuple[str, str]] = set()
    endpoints = []
    for path, item in doc.paths.items():
        for verb, operation in item.operations.items():
            method = verb.upper()
            if method not in HTTP_METHODS or (method, path) in seen:
                continue
            seen.add((method, path))
            endpoints.append(Endpoint(method, path, operation))
    return tuple(endpoints)
