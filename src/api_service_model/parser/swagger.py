"""Swagger 2.0 / OpenAPI 3.x document loader.

Converts a YAML or JSON document into the ApiDocument schema graph. This
is an adapter, not a validator: shapes the model builder cannot handle
are passed through and rejected there.
"""

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from api_service_model.entities.errors import InvalidDocument, MissingReference, UnsupportedConstruct
from api_service_model.parser.base import (
    AllOfSchema,
    AnySchema,
    ApiDocument,
    ArraySchema,
    BooleanSchema,
    EnumerationSchema,
    FileSchema,
    IntegerSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    Operation,
    Parameter,
    PathItem,
    Response,
    Schema,
    StringSchema,
    StructureSchema,
)
from api_service_model.parser.detect import detect_version

logger = logging.getLogger(__name__)

HTTP_VERBS = ("get", "put", "post", "delete", "options", "head", "patch")

DEFINITION_PREFIXES = ("#/definitions/", "#/components/schemas/")


def load_document(file_path: Path) -> dict:
    """Read a YAML or JSON document into plain Python data."""
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def parse_document(file_path: Path) -> ApiDocument:
    """Parse a Swagger 2.0 or OpenAPI 3.x file."""
    doc = load_document(file_path)
    version = detect_version(doc)
    logger.debug("Parsing %s as %s", file_path, version)

    try:
        if version == "swagger":
            return parse_swagger(doc)
        elif version == "openapi":
            return parse_openapi(doc)
    except ValidationError as e:
        raise InvalidDocument(str(file_path), str(e)) from e
    raise UnsupportedConstruct(f"document is neither Swagger 2.0 nor OpenAPI 3 ({file_path})")


def parse_swagger(doc: dict) -> ApiDocument:
    """Convert a Swagger 2.0 document."""
    definitions = doc.get("definitions") or {}
    known_names = set(definitions)

    paths = {}
    for path, path_item in (doc.get("paths") or {}).items():
        operations = {}
        for verb, operation in path_item.items():
            if verb.lower() not in HTTP_VERBS:
                continue
            parameters = _merge_parameters(doc, path_item.get("parameters", []), operation.get("parameters", []))
            operations[verb.lower()] = Operation(
                operation_id=operation.get("operationId"),
                summary=operation.get("summary", ""),
                description=operation.get("description"),
                parameters=[_parse_swagger_parameter(p, known_names) for p in parameters],
                responses=_parse_responses(doc, operation.get("responses", {}), known_names, _swagger_response),
            )
        paths[path] = PathItem(operations=operations)

    return ApiDocument(
        definitions={name: parse_schema(schema, known_names) for name, schema in definitions.items()},
        paths=paths,
    )


def parse_openapi(doc: dict) -> ApiDocument:
    """Convert an OpenAPI 3.x document."""
    definitions = (doc.get("components") or {}).get("schemas") or {}
    known_names = set(definitions)

    paths = {}
    for path, path_item in (doc.get("paths") or {}).items():
        operations = {}
        for verb, operation in path_item.items():
            if verb.lower() not in HTTP_VERBS:
                continue
            parameters = _merge_parameters(doc, path_item.get("parameters", []), operation.get("parameters", []))
            parsed = [_parse_openapi_parameter(p, known_names) for p in parameters]
            request_body = _parse_request_body(doc, operation.get("requestBody"), known_names)
            if request_body is not None:
                # appended so that the other parameters keep their indices
                parsed.append(request_body)

            operations[verb.lower()] = Operation(
                operation_id=operation.get("operationId"),
                summary=operation.get("summary", ""),
                description=operation.get("description"),
                parameters=parsed,
                responses=_parse_responses(doc, operation.get("responses", {}), known_names, _openapi_response),
            )
        paths[path] = PathItem(operations=operations)

    return ApiDocument(
        definitions={name: parse_schema(schema, known_names) for name, schema in definitions.items()},
        paths=paths,
    )


def parse_schema(raw: dict, known_names: set[str]) -> Schema:
    """Convert one raw schema object; `$ref`s to definitions become StructureSchema nodes."""
    description = raw.get("description")

    if "$ref" in raw:
        return StructureSchema(name=_definition_name(raw["$ref"], known_names), description=description)
    if "allOf" in raw:
        return AllOfSchema(
            subschemas=[parse_schema(s, known_names) for s in raw["allOf"]],
            description=description,
        )
    for key in ("oneOf", "anyOf"):
        if key in raw:
            return OneOfSchema(
                subschemas=[parse_schema(s, known_names) for s in raw[key]],
                description=description,
            )

    schema_type = _schema_type(raw)

    if schema_type == "boolean":
        return BooleanSchema(description=description)
    elif schema_type == "integer":
        return IntegerSchema(format=raw.get("format"), description=description, **_numeric_range(raw))
    elif schema_type == "number":
        return NumberSchema(format=raw.get("format"), description=description, **_numeric_range(raw))
    elif schema_type == "string":
        if raw.get("format") == "binary":
            return FileSchema(description=description)
        return StringSchema(
            format=raw.get("format"),
            pattern=raw.get("pattern"),
            min_length=raw.get("minLength"),
            max_length=raw.get("maxLength"),
            enum=raw.get("enum"),
            description=description,
        )
    elif schema_type == "enumeration":
        return EnumerationSchema(enum=raw["enum"], description=description)
    elif schema_type == "object":
        additional = raw.get("additionalProperties")
        return ObjectSchema(
            properties={
                name: parse_schema(prop, known_names) for name, prop in (raw.get("properties") or {}).items()
            },
            required=raw.get("required", []),
            additional_properties=parse_schema(additional, known_names) if isinstance(additional, dict) else None,
            description=description,
        )
    elif schema_type == "array":
        items = raw.get("items", {})
        item_list = items if isinstance(items, list) else [items]
        return ArraySchema(
            items=[parse_schema(item, known_names) for item in item_list],
            min_items=raw.get("minItems"),
            max_items=raw.get("maxItems"),
            description=description,
        )
    elif schema_type == "file":
        return FileSchema(description=description)
    elif schema_type == "null":
        return NullSchema(description=description)
    return AnySchema(description=description)


def _schema_type(raw: dict) -> str:
    schema_type = raw.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 nullable form, e.g. ["string", "null"]
        non_null = [t for t in schema_type if t != "null"]
        if not non_null:
            return "null"
        schema_type = non_null[0] if len(non_null) == 1 else None
        if schema_type is None:
            return "any"

    if schema_type is None:
        if "enum" in raw:
            return "enumeration"
        if "properties" in raw or "additionalProperties" in raw:
            return "object"
        return "any"
    return schema_type


def _numeric_range(raw: dict) -> dict:
    minimum = raw.get("minimum")
    maximum = raw.get("maximum")
    exclusive_minimum = raw.get("exclusiveMinimum", False)
    exclusive_maximum = raw.get("exclusiveMaximum", False)

    # OpenAPI 3.1 gives the exclusive bound as a number
    if not isinstance(exclusive_minimum, bool):
        minimum, exclusive_minimum = exclusive_minimum, True
    if not isinstance(exclusive_maximum, bool):
        maximum, exclusive_maximum = exclusive_maximum, True

    return {
        "minimum": minimum,
        "maximum": maximum,
        "exclusive_minimum": exclusive_minimum,
        "exclusive_maximum": exclusive_maximum,
    }


def _definition_name(ref: str, known_names: set[str]) -> str:
    for prefix in DEFINITION_PREFIXES:
        if ref.startswith(prefix):
            name = ref[len(prefix):]
            if name not in known_names:
                raise MissingReference(name, f"$ref {ref}")
            return name
    raise UnsupportedConstruct(f"non-local schema reference {ref}")


def _resolve(doc: dict, value: dict) -> dict:
    """Follow a local `$ref` to a shared parameter, response, header or request body."""
    ref = value.get("$ref")
    if ref is None:
        return value
    if not ref.startswith("#/"):
        raise UnsupportedConstruct(f"non-local reference {ref}")

    target = doc
    for segment in ref[2:].split("/"):
        if not isinstance(target, dict) or segment not in target:
            raise MissingReference(ref, "local reference")
        target = target[segment]
    return _resolve(doc, target)


def _merge_parameters(doc: dict, path_level: list[dict], operation_level: list[dict]) -> list[dict]:
    """Path-level parameters first, unless the operation redefines them."""
    operation_params = [_resolve(doc, p) for p in operation_level]
    overridden = {(p["name"], p.get("in")) for p in operation_params}
    inherited = [p for p in (_resolve(doc, p) for p in path_level) if (p["name"], p.get("in")) not in overridden]
    return inherited + operation_params


def _parse_swagger_parameter(param: dict, known_names: set[str]) -> Parameter:
    location = param.get("in", "query")
    if location == "body":
        value_schema = parse_schema(param.get("schema", {}), known_names)
    else:
        # non-body Swagger 2.0 parameters carry their type inline
        value_schema = parse_schema(param, known_names)

    return Parameter(
        name=param["name"],
        location=location,
        required=param.get("required", False),
        description=param.get("description"),
        value_schema=value_schema,
    )


def _parse_openapi_parameter(param: dict, known_names: set[str]) -> Parameter:
    return Parameter(
        name=param["name"],
        location=param.get("in", "query"),
        required=param.get("required", False),
        description=param.get("description"),
        value_schema=parse_schema(param.get("schema", {}), known_names),
    )


def _parse_request_body(doc: dict, body: dict | None, known_names: set[str]) -> Parameter | None:
    if not body:
        return None
    body = _resolve(doc, body)
    schema = _content_schema(body.get("content", {}))
    if schema is None:
        return None
    return Parameter(
        name="body",
        location="body",
        required=body.get("required", False),
        description=body.get("description"),
        value_schema=parse_schema(schema, known_names),
    )


def _content_schema(content: dict) -> dict | None:
    for content_type in ("application/json", "multipart/form-data"):
        if content_type in content:
            return content[content_type].get("schema")
    # Fallback: return first available schema
    for ct_data in content.values():
        return ct_data.get("schema")
    return None


def _parse_responses(doc: dict, responses: dict, known_names: set[str], parse_response) -> dict[int, Response]:
    result = {}
    for status_code, response in responses.items():
        try:
            code = int(status_code)
        except (TypeError, ValueError):
            logger.debug("Skipping response '%s' without a numeric status code", status_code)
            continue
        result[code] = parse_response(_resolve(doc, response), doc, known_names)
    return result


def _swagger_response(response: dict, doc: dict, known_names: set[str]) -> Response:
    schema = response.get("schema")
    return Response(
        description=response.get("description", ""),
        body_schema=parse_schema(schema, known_names) if schema is not None else None,
        headers={
            name: parse_schema(_resolve(doc, header), known_names)
            for name, header in (response.get("headers") or {}).items()
        },
    )


def _openapi_response(response: dict, doc: dict, known_names: set[str]) -> Response:
    schema = _content_schema(response.get("content") or {})
    headers = {}
    for name, header in (response.get("headers") or {}).items():
        header = _resolve(doc, header)
        header_schema = dict(header.get("schema", {}))
        header_schema.setdefault("description", header.get("description"))
        headers[name] = parse_schema(header_schema, known_names)

    return Response(
        description=response.get("description", ""),
        body_schema=parse_schema(schema, known_names) if schema is not None else None,
        headers=headers,
    )
