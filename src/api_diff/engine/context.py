"""Diff context shared read-only by every rule."""

import logging
from dataclasses import dataclass
from typing import NamedTuple

from api_diff.parser.base import Document, Operation

from .endpoints import Endpoint, build_endpoint_index

logger = logging.getLogger(__name__)


class CommonOperation(NamedTuple):
    """An endpoint present in both documents."""

    path: str
    method: str
    old: Operation
    new: Operation

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


@dataclass(frozen=True)
class DiffContext:
    old_doc: Document
    new_doc: Document
    old_endpoints: tuple[Endpoint, ...]
    new_endpoints: tuple[Endpoint, ...]
    common_operations: tuple[CommonOperation, ...]


def build_context(old_doc: Document, new_doc: Document) -> DiffContext:
    """Index both documents and join them on the exact (method, path) key."""
    old_endpoints = build_endpoint_index(old_doc)
    new_endpoints = build_endpoint_index(new_doc)

    new_by_key = {ep.key: ep for ep in new_endpoints}
    common = tuple(
        CommonOperation(ep.path, ep.method, ep.operation, new_by_key[ep.key].operation)
        for ep in old_endpoints
        if ep.key in new_by_key
    )

    logger.debug(
        "Indexed %d old endpoints, %d new endpoints, %d in common",
        len(old_endpoints), len(new_endpoints), len(common),
    )
    return DiffContext(
        old_doc=old_doc,
        new_doc=new_doc,
        old_endpoints=old_endpoints,
        new_endpoints=new_endpoints,
        common_operations=common,
    )
