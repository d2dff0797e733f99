"""Operation output: response bodies, error types and response headers."""

import logging

from api_service_model.entities.errors import MissingReference
from api_service_model.entities.model import (
    Member,
    OperationDescription,
    OperationOutputDescription,
    StructureDescription,
    renumber_members,
)
from api_service_model.entities.naming import safe_model_name, starting_with_uppercase
from api_service_model.model.filters import OverrideFilter
from api_service_model.model.walker import SchemaWalker
from api_service_model.parser.base import OneOfSchema, Response, Schema, StructureSchema

logger = logging.getLogger(__name__)

# member holding a body that is a field rather than a structure
BODY_MEMBER = "body"


def is_success_code(code: int) -> bool:
    return 200 <= code < 300


class ResponseMerger:
    """Builds an operation's output and error list from its responses."""

    def __init__(self, walker: SchemaWalker, override_filter: OverrideFilter):
        self.walker = walker
        self.filter = override_filter

    @property
    def model(self):
        return self.walker.model

    def set_operation_output(
        self,
        operation_name: str,
        responses: dict[int, Response],
        description: OperationDescription,
        operation_id: str | None = None,
    ) -> None:
        """Register each response body and header set of an operation.

        Response headers are filtered by `operation_id`, which defaults to
        `operation_name`.
        """
        filter_key = operation_name if operation_id is None else operation_id

        for code in sorted(responses):
            response = responses[code]
            header_members = self._header_members(operation_name, filter_key, code, response.headers)

            body_name = None
            if response.body_schema is not None:
                body_name = self.add_response_from_schema(
                    response.body_schema, operation_name, code, None, description
                )

            if header_members:
                self._set_output_with_headers(operation_name, code, body_name, header_members, description)

    def add_response_from_schema(
        self,
        schema: Schema,
        operation_name: str,
        code: int,
        index: int | None,
        description: OperationDescription,
    ) -> str | None:
        """Register a response body and return its type name.

        For oneOf bodies every alternative is registered and the last one's
        name is returned.
        """
        if isinstance(schema, OneOfSchema):
            type_name = None
            for alternative_index, alternative in enumerate(schema.subschemas):
                type_name = self.add_response_from_schema(
                    alternative, operation_name, code, alternative_index, description
                )
            return type_name

        if isinstance(schema, StructureSchema):
            type_name = schema.name
        else:
            index_string = "" if index is None else str(index)
            type_name = self.walker.walk(schema, f"{operation_name}{code}Response{index_string}Body")

        if is_success_code(code):
            description.output = type_name
        else:
            description.errors.append((type_name, code))
            self.model.error_types.add(type_name)
        return type_name

    def _header_members(
        self, operation_name: str, filter_key: str | None, code: int, headers: dict[str, Schema]
    ) -> dict[str, Member]:
        members = {}
        filtered = self.filter.filter_response_headers(filter_key, code, headers)
        for position, (header_name, header_schema) in enumerate(filtered.items()):
            type_name = starting_with_uppercase(safe_model_name(header_name))
            field_name = f"{operation_name}{type_name}Header"
            self.walker.add_field(header_schema, field_name)

            members[header_name] = Member(
                value=field_name,
                position=position,
                required=False,
                documentation=header_schema.description,
            )
        return members

    def _set_output_with_headers(
        self,
        operation_name: str,
        code: int,
        body_name: str | None,
        header_members: dict[str, Member],
        description: OperationDescription,
    ) -> None:
        all_members: dict[str, Member] = {}
        body_fields: list[str] = []
        body_structure_name = None
        payload_as_member = None

        if body_name is not None:
            if body_name in self.model.structure_descriptions:
                body_members = self.model.structure_descriptions[body_name].members
                all_members.update(body_members)
                body_fields = list(body_members)
                body_structure_name = body_name
            elif body_name in self.model.field_descriptions:
                all_members[BODY_MEMBER] = Member(value=body_name, position=0, required=True)
                body_fields = [BODY_MEMBER]
                payload_as_member = BODY_MEMBER
            else:
                raise MissingReference(body_name, "response body", operation_name)

        # a header replaces a body member of the same name
        all_members.update(header_members)

        output_name = f"{operation_name}{code}Response"
        self.walker.register_structure(
            output_name,
            StructureDescription(
                members=renumber_members(all_members),
                documentation=f"Output model for the {operation_name} operation.",
            ),
        )
        description.output = output_name
        description.output_description = OperationOutputDescription(
            body_fields=body_fields,
            header_fields=list(header_members),
            body_structure_name=body_structure_name,
            payload_as_member=payload_as_member,
        )
