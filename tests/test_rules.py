from api_diff.engine.context import build_context
from api_diff.engine.events import Severity
from api_diff.engine.rules import (
    RULE_IDS,
    RULES,
    endpoint_removed,
    request_body_added,
    request_enum_value_removed,
    request_field_type_changed,
    required_request_field_added,
    response_field_changed,
)
from api_diff.parser.base import Document

JSON = "application/json"


def _op_doc(method="post", path="/users", body=None, body_required=False, responses=None) -> Document:
    op = {}
    if body is not None:
        op["request_body"] = {"required": body_required, "content": body}
    if responses is not None:
        op["responses"] = {code: {"content": content} for code, content in responses.items()}
    return Document.model_validate({"paths": {path: {"operations": {method: op}}}})


def _obj(properties: dict, required: list | None = None) -> dict:
    return {"type": "object", "properties": properties, "required": required or []}


def _run(rule, old: Document, new: Document):
    return rule(build_context(old, new))


class TestEndpointRemoved:
    def test_removed_endpoint(self):
        old = Document.model_validate({"paths": {"/users": {"operations": {"get": {}, "delete": {}}}}})
        new = Document.model_validate({"paths": {"/users": {"operations": {"get": {}}}}})
        events = _run(endpoint_removed, old, new)
        assert len(events) == 1
        assert events[0].rule_id == "ENDPOINT_REMOVED"
        assert events[0].severity == Severity.BREAKING
        assert events[0].message == "BREAKING: DELETE /users removed"
        assert events[0].operation.method == "DELETE"
        assert events[0].location is None

    def test_added_endpoint_is_not_reported(self):
        assert _run(endpoint_removed, Document(), _op_doc()) == []


class TestRequestBodyAdded:
    def test_required_body_added(self):
        old = _op_doc()
        new = _op_doc(body={JSON: _obj({})}, body_required=True)
        events = _run(request_body_added, old, new)
        assert [e.rule_id for e in events] == ["REQ_BODY_ADDED"]
        assert events[0].message == "BREAKING: POST /users added a required request body"
        assert events[0].location.area == "requestBody"

    def test_optional_body_added_is_fine(self):
        new = _op_doc(body={JSON: _obj({})}, body_required=False)
        assert _run(request_body_added, _op_doc(), new) == []

    def test_body_became_required(self):
        old = _op_doc(body={JSON: _obj({})}, body_required=False)
        new = _op_doc(body={JSON: _obj({})}, body_required=True)
        events = _run(request_body_added, old, new)
        assert [e.rule_id for e in events] == ["REQ_BODY_BECAME_REQUIRED"]
        assert events[0].message == "BREAKING: request body became required for POST /users"

    def test_non_json_body_becoming_required(self):
        old = _op_doc(body={"text/plain": {"type": "string"}}, body_required=False)
        new = _op_doc(body={"text/plain": {"type": "string"}}, body_required=True)
        events = _run(request_body_added, old, new)
        assert [e.rule_id for e in events] == ["REQ_BODY_BECAME_REQUIRED"]

    def test_json_body_added_beside_other_media_type(self):
        old = _op_doc(body={"text/plain": {"type": "string"}}, body_required=False)
        new = _op_doc(body={JSON: _obj({})}, body_required=True)
        events = _run(request_body_added, old, new)
        assert [e.rule_id for e in events] == ["REQ_BODY_ADDED"]


class TestRequiredRequestFieldAdded:
    def test_new_required_field(self):
        old = _op_doc(body={JSON: _obj({"name": {}, "email": {}}, ["name"])})
        new = _op_doc(body={JSON: _obj({"name": {}, "email": {}}, ["name", "email"])})
        events = _run(required_request_field_added, old, new)
        assert len(events) == 1
        assert events[0].details == {"field": "email"}
        assert events[0].message == (
            "BREAKING: required field 'email' added to request body for POST /users (application/json)"
        )
        assert events[0].location.json_pointer == "/requestBody/content/application~1json/schema/required"

    def test_only_object_schemas_checked(self):
        old = _op_doc(body={JSON: {"type": "array"}})
        new = _op_doc(body={JSON: {"type": "array", "required": ["x"]}})
        assert _run(required_request_field_added, old, new) == []

    def test_no_old_schema_counts_all_required(self):
        old = _op_doc()
        new = _op_doc(body={JSON: _obj({"a": {}, "b": {}}, ["a", "b"])})
        events = _run(required_request_field_added, old, new)
        assert [e.details["field"] for e in events] == ["a", "b"]

    def test_duplicate_required_entry_reported_once(self):
        old = _op_doc(body={JSON: _obj({})})
        new = _op_doc(body={JSON: _obj({}, ["a", "a"])})
        assert len(_run(required_request_field_added, old, new)) == 1

    def test_other_media_types_ignored(self):
        old = _op_doc(body={"application/xml": _obj({})})
        new = _op_doc(body={"application/xml": _obj({}, ["a"])})
        assert _run(required_request_field_added, old, new) == []


class TestRequestFieldTypeChanged:
    def test_type_changed(self):
        old = _op_doc(body={JSON: _obj({"age": {"type": "string"}})})
        new = _op_doc(body={JSON: _obj({"age": {"type": "integer"}})})
        events = _run(request_field_type_changed, old, new)
        assert len(events) == 1
        assert events[0].details == {"field": "age", "oldType": "string", "newType": "integer"}
        assert events[0].message == "BREAKING: POST /users request field 'age' changed type from string to integer"
        assert events[0].location.json_pointer == (
            "/requestBody/content/application~1json/schema/properties/age"
        )

    def test_type_removed_counts_as_change(self):
        old = _op_doc(body={JSON: _obj({"age": {"type": "string"}})})
        new = _op_doc(body={JSON: _obj({"age": {}})})
        events = _run(request_field_type_changed, old, new)
        assert events[0].details["newType"] is None
        assert events[0].message.endswith("from string to null")

    def test_removed_property_not_reported(self):
        old = _op_doc(body={JSON: _obj({"age": {"type": "string"}})})
        new = _op_doc(body={JSON: _obj({})})
        assert _run(request_field_type_changed, old, new) == []

    def test_nested_changes_not_recursed(self):
        old = _op_doc(body={JSON: _obj({"addr": _obj({"zip": {"type": "string"}})})})
        new = _op_doc(body={JSON: _obj({"addr": _obj({"zip": {"type": "integer"}})})})
        assert _run(request_field_type_changed, old, new) == []


class TestRequestEnumValueRemoved:
    def test_enum_value_removed(self):
        old = _op_doc(body={JSON: _obj({"status": {"type": "string", "enum": ["active", "inactive"]}})})
        new = _op_doc(body={JSON: _obj({"status": {"type": "string", "enum": ["active"]}})})
        events = _run(request_enum_value_removed, old, new)
        assert len(events) == 1
        assert events[0].details == {"field": "status", "removedValue": "inactive"}
        assert events[0].message == "BREAKING: POST /users request field 'status' removed enum value 'inactive'"

    def test_null_enum_literal_removed(self):
        old = _op_doc(body={JSON: _obj({"status": {"enum": ["a", None]}})})
        new = _op_doc(body={JSON: _obj({"status": {"enum": ["a"]}})})
        events = _run(request_enum_value_removed, old, new)
        assert len(events) == 1
        assert events[0].details == {"field": "status", "removedValue": None}
        assert events[0].message.endswith("removed enum value 'null'")

    def test_enum_dropped_entirely(self):
        old = _op_doc(body={JSON: _obj({"status": {"enum": ["a", "b"]}})})
        new = _op_doc(body={JSON: _obj({"status": {}})})
        events = _run(request_enum_value_removed, old, new)
        assert [e.details["removedValue"] for e in events] == ["a", "b"]

    def test_no_old_enum(self):
        old = _op_doc(body={JSON: _obj({"status": {}})})
        new = _op_doc(body={JSON: _obj({"status": {"enum": ["a"]}})})
        assert _run(request_enum_value_removed, old, new) == []

    def test_added_enum_value_is_fine(self):
        old = _op_doc(body={JSON: _obj({"status": {"enum": ["a"]}})})
        new = _op_doc(body={JSON: _obj({"status": {"enum": ["a", "b"]}})})
        assert _run(request_enum_value_removed, old, new) == []


class TestResponseFieldChanged:
    def test_field_removed(self):
        old = _op_doc("get", responses={"200": {JSON: _obj({"id": {"type": "string"}, "name": {"type": "string"}})}})
        new = _op_doc("get", responses={"200": {JSON: _obj({"id": {"type": "string"}})}})
        events = _run(response_field_changed, old, new)
        assert len(events) == 1
        assert events[0].rule_id == "RES_FIELD_REMOVED"
        assert events[0].details == {"field": "name"}
        assert events[0].message == "BREAKING: GET /users response removed field 'name'"
        assert events[0].location.area == "responses"
        assert events[0].location.json_pointer == (
            "/responses/200/content/application~1json/schema/properties/name"
        )

    def test_field_type_changed(self):
        old = _op_doc("get", responses={"200": {JSON: _obj({"id": {"type": "integer"}})}})
        new = _op_doc("get", responses={"200": {JSON: _obj({"id": {"type": "string"}})}})
        events = _run(response_field_changed, old, new)
        assert events[0].rule_id == "RES_FIELD_TYPE_CHANGED"
        assert events[0].details == {"field": "id", "oldType": "integer", "newType": "string"}

    def test_field_type_became_null(self):
        old = _op_doc("get", responses={"200": {JSON: _obj({"id": {"type": "integer"}})}})
        new = _op_doc("get", responses={"200": {JSON: _obj({"id": {}})}})
        events = _run(response_field_changed, old, new)
        assert [e.rule_id for e in events] == ["RES_FIELD_TYPE_CHANGED"]
        assert events[0].details == {"field": "id", "oldType": "integer", "newType": None}
        assert events[0].message.endswith("from integer to null")

    def test_first_declared_success_response_used(self):
        old = _op_doc("get", responses={
            "201": {JSON: _obj({"id": {}})},
            "200": {JSON: _obj({"id": {}, "name": {}})},
        })
        new = _op_doc("get", responses={
            "201": {JSON: _obj({"id": {}})},
            "200": {JSON: _obj({"id": {}})},
        })
        assert _run(response_field_changed, old, new) == []

    def test_error_responses_ignored(self):
        old = _op_doc("get", responses={"400": {JSON: _obj({"code": {}})}})
        new = _op_doc("get", responses={"400": {JSON: _obj({})}})
        assert _run(response_field_changed, old, new) == []

    def test_new_response_without_json_schema(self):
        old = _op_doc("get", responses={"200": {JSON: _obj({"id": {}})}})
        new = _op_doc("get", responses={"200": {}})
        assert _run(response_field_changed, old, new) == []


class TestRuleTable:
    def test_declaration_order(self):
        assert list(RULES) == [
            "ENDPOINT_REMOVED",
            "REQ_BODY_ADDED",
            "REQ_FIELD_ADDED",
            "REQ_FIELD_TYPE_CHANGED",
            "REQ_ENUM_VALUE_REMOVED",
            "RES_FIELD_REMOVED",
        ]

    def test_every_rule_declares_its_event_ids(self):
        assert list(RULE_IDS) == list(RULES)
        assert RULE_IDS["REQ_BODY_ADDED"] == ("REQ_BODY_ADDED", "REQ_BODY_BECAME_REQUIRED")
        assert RULE_IDS["RES_FIELD_REMOVED"] == ("RES_FIELD_REMOVED", "RES_FIELD_TYPE_CHANGED")

    def test_rules_tolerate_empty_operations(self):
        old = Document.model_validate({"paths": {"/a": {"operations": {"get": {}}}}})
        context = build_context(old, old)
        for rule in RULES.values():
            assert rule(context) == []
