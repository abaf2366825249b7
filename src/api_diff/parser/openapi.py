"""OpenAPI / Swagger document parser.

Parses OpenAPI 3.x and Swagger 2.0 documents into the Document model.
Local ``$ref`` pointers (``#/...``) are followed while the model is built;
a pointer already visited on the current branch, or one pointing outside
the document, yields an empty schema node. Schemas are built one property
level deep; member schemas of properties are left empty.
"""

import json

import yaml
from pydantic import ValidationError

from api_diff.errors import MalformedDocumentError

from .base import Document, Operation, PathItem, RequestBody, Response, SchemaNode
from .detect import detect_version

DEFAULT_MEDIA_TYPE = "application/json"


def parse_document(text: str, source: str | None = None) -> Document:
    """Parse OpenAPI/Swagger text (YAML or JSON) into a Document."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MalformedDocumentError(f"Failed to parse document: {e}", source) from e

    if not isinstance(raw, dict):
        raise MalformedDocumentError("Document root must be a mapping", source)

    version = detect_version(raw, source)
    paths = raw.get("paths") or {}
    if not isinstance(paths, dict):
        raise MalformedDocumentError("'paths' must be a mapping", source)

    try:
        return Document(
            paths={
                str(path): _parse_path_item(item, raw, version)
                for path, item in paths.items()
            }
        )
    except ValidationError as e:
        raise MalformedDocumentError(f"Failed to build document model: {e}", source) from e


def _parse_path_item(item: dict | None, root: dict, version: str) -> PathItem:
    item, _ = _resolve(item, root, frozenset())
    if item is None:
        return PathItem()

    shared_params = item.get("parameters") or []
    operations = {}
    for method, operation in item.items():
        # parameters, servers, summary etc. are not mappings
        if not isinstance(operation, dict):
            continue
        if version == "swagger2":
            operations[str(method)] = _parse_swagger_operation(operation, shared_params, root)
        else:
            operations[str(method)] = _parse_operation(operation, root)
    return PathItem(operations=operations)


def _parse_operation(operation: dict, root: dict) -> Operation:
    return Operation(
        request_body=_parse_request_body(operation.get("requestBody"), root),
        responses=_parse_responses(operation.get("responses"), root),
    )


def _parse_request_body(body: dict | None, root: dict) -> RequestBody | None:
    body, seen = _resolve(body, root, frozenset())
    if body is None:
        return None
    return RequestBody(
        required=bool(body.get("required", False)),
        content=_parse_content(body.get("content"), root, seen),
    )


def _parse_responses(responses: dict | None, root: dict) -> dict[str, Response]:
    if not isinstance(responses, dict):
        return {}

    result = {}
    for status_code, resp in responses.items():
        resp, seen = _resolve(resp, root, frozenset())
        content = _parse_content(resp.get("content"), root, seen) if resp else {}
        # YAML reads an unquoted 200 as an int
        result[str(status_code)] = Response(content=content)
    return result


def _parse_content(content: dict | None, root: dict, seen: frozenset) -> dict[str, SchemaNode]:
    if not isinstance(content, dict):
        return {}
    # A media type entry without a schema carries nothing to compare.
    return {
        str(media_type): _parse_schema(media["schema"], root, seen)
        for media_type, media in content.items()
        if isinstance(media, dict) and media.get("schema") is not None
    }


def _parse_swagger_operation(operation: dict, shared_params: list, root: dict) -> Operation:
    consumes = _media_types(operation.get("consumes") or root.get("consumes"))
    produces = _media_types(operation.get("produces") or root.get("produces"))

    request_body = None
    for param in _as_list(operation.get("parameters")) + _as_list(shared_params):
        param, seen = _resolve(param, root, frozenset())
        if param is None or param.get("in") != "body":
            continue
        schema = _parse_schema(param.get("schema"), root, seen)
        request_body = RequestBody(
            required=bool(param.get("required", False)),
            content={str(mt): schema for mt in consumes},
        )
        break

    responses = {}
    raw_responses = operation.get("responses")
    if not isinstance(raw_responses, dict):
        raw_responses = {}
    for status_code, resp in raw_responses.items():
        resp, seen = _resolve(resp, root, frozenset())
        content = {}
        if resp is not None and resp.get("schema") is not None:
            schema = _parse_schema(resp["schema"], root, seen)
            content = {str(mt): schema for mt in produces}
        responses[str(status_code)] = Response(content=content)

    return Operation(request_body=request_body, responses=responses)


def _as_list(value) -> list:
    return list(value) if isinstance(value, list) else []


def _media_types(value) -> list[str]:
    if isinstance(value, str):
        return [value]
    types = [str(mt) for mt in _as_list(value)]
    return types or [DEFAULT_MEDIA_TYPE]


def _parse_schema(node: dict | None, root: dict, seen: frozenset, depth: int = 1) -> SchemaNode:
    """Build a schema node, descending ``depth`` levels of properties.

    Below that the rules compare nothing, so member schemas are left empty.
    """
    node, seen = _resolve(node, root, seen)
    if node is None:
        return SchemaNode()

    properties = node.get("properties")
    required = node.get("required")
    enum = node.get("enum")
    return SchemaNode(
        type=_type_literal(node.get("type")),
        properties={
            str(name): _parse_schema(sub, root, seen, depth - 1) for name, sub in properties.items()
        } if depth > 0 and isinstance(properties, dict) else {},
        # OpenAPI 3 puts a boolean 'required' on properties; only lists are field names
        required=[str(name) for name in required] if isinstance(required, list) else [],
        enum=[_enum_literal(value) for value in enum] if isinstance(enum, list) else [],
    )


def _type_literal(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        # OpenAPI 3.1 allows type: [string, "null"]
        return "|".join(str(t) for t in value)
    return str(value)


def _enum_literal(value) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def _resolve(node, root: dict, seen: frozenset) -> tuple[dict | None, frozenset]:
    """Follow local $ref pointers until a concrete mapping is reached."""
    while isinstance(node, dict) and isinstance(node.get("$ref"), str):
        ref = node["$ref"]
        if not ref.startswith("#/") or ref in seen:
            return None, seen
        seen = seen | {ref}
        node = _follow_pointer(root, ref)
    if not isinstance(node, dict):
        return None, seen
    return node, seen


def _follow_pointer(root: dict, ref: str):
    node = root
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or token not in node:
            return None
        node = node[token]
    return node
