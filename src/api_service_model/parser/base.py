"""Schema object graph for parsed API documents.

The Swagger 2.0 and OpenAPI 3.x loaders convert their input into these
models. References to named definitions are kept as `StructureSchema`
nodes carrying only the definition name; `ApiDocument.definitions`
resolves them.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class _SchemaNode(BaseModel):
    description: str | None = None


class BooleanSchema(_SchemaNode):
    type: Literal["boolean"] = "boolean"


class IntegerSchema(_SchemaNode):
    type: Literal["integer"] = "integer"
    format: str | None = None  # int32 / int64
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False


class NumberSchema(_SchemaNode):
    type: Literal["number"] = "number"
    format: str | None = None  # float / double
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False


class StringSchema(_SchemaNode):
    type: Literal["string"] = "string"
    format: str | None = None
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    enum: list | None = None


class EnumerationSchema(_SchemaNode):
    """An enum without a declared type."""

    type: Literal["enumeration"] = "enumeration"
    enum: list = []


class StructureSchema(_SchemaNode):
    """A reference to a named definition."""

    type: Literal["structure"] = "structure"
    name: str


class ObjectSchema(_SchemaNode):
    type: Literal["object"] = "object"
    properties: dict[str, "Schema"] = {}
    required: list[str] = []
    additional_properties: "Schema | None" = None


class ArraySchema(_SchemaNode):
    type: Literal["array"] = "array"
    items: list["Schema"] = []  # more than one entry is a tuple-typed array
    min_items: int | None = None
    max_items: int | None = None


class AllOfSchema(_SchemaNode):
    type: Literal["allOf"] = "allOf"
    subschemas: list["Schema"] = []


class OneOfSchema(_SchemaNode):
    type: Literal["oneOf"] = "oneOf"
    subschemas: list["Schema"] = []


class FileSchema(_SchemaNode):
    type: Literal["file"] = "file"


class AnySchema(_SchemaNode):
    type: Literal["any"] = "any"


class NullSchema(_SchemaNode):
    type: Literal["null"] = "null"


Schema = Annotated[
    Union[
        BooleanSchema,
        IntegerSchema,
        NumberSchema,
        StringSchema,
        EnumerationSchema,
        StructureSchema,
        ObjectSchema,
        ArraySchema,
        AllOfSchema,
        OneOfSchema,
        FileSchema,
        AnySchema,
        NullSchema,
    ],
    Field(discriminator="type"),
]

ObjectSchema.model_rebuild()
ArraySchema.model_rebuild()
AllOfSchema.model_rebuild()
OneOfSchema.model_rebuild()


class Parameter(BaseModel):
    """A single operation parameter."""

    name: str
    location: str  # path / query / header / body (formData and cookie are rejected later)
    required: bool = False
    description: str | None = None
    value_schema: Schema


class Response(BaseModel):
    description: str = ""
    body_schema: Schema | None = None
    headers: dict[str, Schema] = {}


class Operation(BaseModel):
    operation_id: str | None = None
    summary: str = ""
    description: str | None = None
    parameters: list[Parameter] = []
    responses: dict[int, Response] = {}


class PathItem(BaseModel):
    operations: dict[str, Operation] = {}  # keyed by lowercase HTTP verb


class ApiDocument(BaseModel):
    """A parsed document: named definitions plus paths."""

    definitions: dict[str, Schema] = {}
    paths: dict[str, PathItem] = {}
