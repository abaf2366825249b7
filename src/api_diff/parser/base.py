"""Document model consumed by the comparison engine.

The OpenAPI parser converts its input into these models; the engine
never looks at raw document text.
"""

from pydantic import BaseModel, ConfigDict, Field


class SchemaNode(BaseModel):
    """One level of a JSON-Schema-like node."""

    model_config = ConfigDict(frozen=True)

    type: str | None = None
    properties: dict[str, "SchemaNode"] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)  # declared order, compared as a set
    enum: list[str | None] = Field(default_factory=list)


class RequestBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    required: bool = False
    content: dict[str, SchemaNode] = Field(default_factory=dict)  # media type -> schema


class Response(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: dict[str, SchemaNode] = Field(default_factory=dict)


class Operation(BaseModel):
    """The request/response contract of one endpoint."""

    model_config = ConfigDict(frozen=True)

    request_body: RequestBody | None = None
    responses: dict[str, Response] = Field(default_factory=dict)  # status code -> response


class PathItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    operations: dict[str, Operation] = Field(default_factory=dict)  # declared verb -> operation


class Document(BaseModel):
    """A parsed, de-referenced API description."""

    model_config = ConfigDict(frozen=True)

    paths: dict[str, PathItem] = Field(default_factory=dict)
