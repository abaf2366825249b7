"""Diff event models produced by the comparison rules."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Severity of a finding. Current rules only emit BREAKING."""

    INFO = "Info"
    WARNING = "Warning"
    BREAKING = "Breaking"


class _EventModel(BaseModel):
    # Serialized field names are camelCase (ruleId, contentType, jsonPointer).
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class DiffOperation(_EventModel):
    method: str
    path: str


class DiffLocation(_EventModel):
    area: str  # requestBody / responses
    content_type: str | None = None
    json_pointer: str | None = None


class DiffEvent(_EventModel):
    """One reported incompatibility."""

    severity: Severity
    rule_id: str
    message: str
    operation: DiffOperation | None = None
    location: DiffLocation | None = None
    details: dict[str, Any] | None = None
