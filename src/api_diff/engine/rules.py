"""Breaking-change rules.

Each rule is a plain function ``rule(context) -> list[DiffEvent]``. Rules
read the shared DiffContext and never modify it; absent request bodies,
schemas or properties mean there is nothing to compare.

RULES fixes both the available rules and the order their findings are
reported in. RULE_IDS lists the event ids each rule can emit.
"""

from collections.abc import Callable, Iterator

from api_diff.parser.base import SchemaNode

from .context import CommonOperation, DiffContext
from .events import DiffEvent, DiffLocation, DiffOperation, Severity
from .schema import (
    JSON_MEDIA_TYPE,
    json_pointer,
    json_request_schema,
    request_body_required,
    success_response,
    unique,
)

Rule = Callable[[DiffContext], list[DiffEvent]]

REQUEST_SCHEMA = ("requestBody", "content", JSON_MEDIA_TYPE, "schema")


def _breaking(rule_id: str, message: str, method: str, path: str,
              area: str | None = None, pointer: str | None = None,
              details: dict | None = None) -> DiffEvent:
    location = None
    if area is not None:
        location = DiffLocation(area=area, content_type=JSON_MEDIA_TYPE, json_pointer=pointer)
    return DiffEvent(
        severity=Severity.BREAKING,
        rule_id=rule_id,
        message=message,
        operation=DiffOperation(method=method, path=path),
        location=location,
        details=details,
    )


def _type_name(type_: str | None) -> str:
    return "null" if type_ is None else type_


def endpoint_removed(context: DiffContext) -> list[DiffEvent]:
    """An endpoint of the old document is missing from the new one."""
    new_keys = {ep.key for ep in context.new_endpoints}
    return [
        _breaking("ENDPOINT_REMOVED", f"BREAKING: {ep} removed", ep.method, ep.path)
        for ep in context.old_endpoints
        if ep.key not in new_keys
    ]


def request_body_added(context: DiffContext) -> list[DiffEvent]:
    """A request body appeared as required, or an optional one became required."""
    events = []
    for common in context.common_operations:
        old_schema = json_request_schema(common.old)
        new_schema = json_request_schema(common.new)

        if old_schema is None and new_schema is not None:
            if request_body_required(common.new):
                events.append(_breaking(
                    "REQ_BODY_ADDED",
                    f"BREAKING: {common} added a required request body",
                    common.method, common.path,
                    area="requestBody", pointer=json_pointer("requestBody"),
                ))
        elif not request_body_required(common.old) and request_body_required(common.new):
            events.append(_breaking(
                "REQ_BODY_BECAME_REQUIRED",
                f"BREAKING: request body became required for {common}",
                common.method, common.path,
                area="requestBody", pointer=json_pointer("requestBody", "required"),
            ))
    return events


def required_request_field_added(context: DiffContext) -> list[DiffEvent]:
    """A name was added to the top-level ``required`` list of an object request schema."""
    events = []
    for common in context.common_operations:
        new_schema = json_request_schema(common.new)
        if new_schema is None or new_schema.type != "object":
            continue

        old_schema = json_request_schema(common.old)
        old_required = set(old_schema.required) if old_schema is not None else set()

        for field in unique(new_schema.required):
            if field in old_required:
                continue
            events.append(_breaking(
                "REQ_FIELD_ADDED",
                f"BREAKING: required field '{field}' added to request body for {common} ({JSON_MEDIA_TYPE})",
                common.method, common.path,
                area="requestBody", pointer=json_pointer(*REQUEST_SCHEMA, "required"),
                details={"field": field},
            ))
    return events


def _shared_request_properties(common: CommonOperation) -> Iterator[tuple[str, SchemaNode, SchemaNode]]:
    old_schema = json_request_schema(common.old)
    new_schema = json_request_schema(common.new)
    if old_schema is None or new_schema is None:
        return
    for name, old_prop in old_schema.properties.items():
        new_prop = new_schema.properties.get(name)
        if new_prop is not None:
            yield name, old_prop, new_prop


def request_field_type_changed(context: DiffContext) -> list[DiffEvent]:
    """A request property kept its name but changed its ``type``."""
    events = []
    for common in context.common_operations:
        for name, old_prop, new_prop in _shared_request_properties(common):
            if old_prop.type == new_prop.type:
                continue
            events.append(_breaking(
                "REQ_FIELD_TYPE_CHANGED",
                f"BREAKING: {common} request field '{name}' changed type "
                f"from {_type_name(old_prop.type)} to {_type_name(new_prop.type)}",
                common.method, common.path,
                area="requestBody", pointer=json_pointer(*REQUEST_SCHEMA, "properties", name),
                details={"field": name, "oldType": old_prop.type, "newType": new_prop.type},
            ))
    return events


def request_enum_value_removed(context: DiffContext) -> list[DiffEvent]:
    """A request property no longer accepts one of its old enum literals."""
    events = []
    for common in context.common_operations:
        for name, old_prop, new_prop in _shared_request_properties(common):
            if not old_prop.enum:
                continue
            new_values = set(new_prop.enum)
            for value in unique(old_prop.enum):
                if value in new_values:
                    continue
                events.append(_breaking(
                    "REQ_ENUM_VALUE_REMOVED",
                    f"BREAKING: {common} request field '{name}' removed enum value '{_type_name(value)}'",
                    common.method, common.path,
                    area="requestBody", pointer=json_pointer(*REQUEST_SCHEMA, "properties", name, "enum"),
                    details={"field": name, "removedValue": value},
                ))
    return events


def response_field_changed(context: DiffContext) -> list[DiffEvent]:
    """A property of the first 2xx JSON response was removed or changed type."""
    events = []
    for common in context.common_operations:
        old_success = success_response(common.old)
        new_success = success_response(common.new)
        if old_success is None or new_success is None:
            continue

        status_code, old_schema = old_success
        _, new_schema = new_success
        if old_schema is None or new_schema is None:
            continue

        for name, old_prop in old_schema.properties.items():
            pointer = json_pointer(
                "responses", status_code, "content", JSON_MEDIA_TYPE, "schema", "properties", name
            )
            new_prop = new_schema.properties.get(name)
            if new_prop is None:
                events.append(_breaking(
                    "RES_FIELD_REMOVED",
                    f"BREAKING: {common} response removed field '{name}'",
                    common.method, common.path,
                    area="responses", pointer=pointer,
                    details={"field": name},
                ))
            elif old_prop.type != new_prop.type:
                events.append(_breaking(
                    "RES_FIELD_TYPE_CHANGED",
                    f"BREAKING: {common} response field '{name}' changed type "
                    f"from {_type_name(old_prop.type)} to {_type_name(new_prop.type)}",
                    common.method, common.path,
                    area="responses", pointer=pointer,
                    details={"field": name, "oldType": old_prop.type, "newType": new_prop.type},
                ))
    return events


RULES: dict[str, Rule] = {
    "ENDPOINT_REMOVED": endpoint_removed,
    "REQ_BODY_ADDED": request_body_added,
    "REQ_FIELD_ADDED": required_request_field_added,
    "REQ_FIELD_TYPE_CHANGED": request_field_type_changed,
    "REQ_ENUM_VALUE_REMOVED": request_enum_value_removed,
    "RES_FIELD_REMOVED": response_field_changed,
}

RULE_IDS: dict[str, tuple[str, ...]] = {
    "ENDPOINT_REMOVED": ("ENDPOINT_REMOVED",),
    "REQ_BODY_ADDED": ("REQ_BODY_ADDED", "REQ_BODY_BECAME_REQUIRED"),
    "REQ_FIELD_ADDED": ("REQ_FIELD_ADDED",),
    "REQ_FIELD_TYPE_CHANGED": ("REQ_FIELD_TYPE_CHANGED",),
    "REQ_ENUM_VALUE_REMOVED": ("REQ_ENUM_VALUE_REMOVED",),
    "RES_FIELD_REMOVED": ("RES_FIELD_REMOVED", "RES_FIELD_TYPE_CHANGED"),
}
