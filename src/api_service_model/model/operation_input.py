"""Operation input: parameter classification and the input structure."""

import logging

from pydantic import BaseModel

from api_service_model.entities.errors import MissingReference, UnsupportedConstruct
from api_service_model.entities.model import (
    DefaultInputLocation,
    Member,
    OperationDescription,
    OperationInputDescription,
    StructureDescription,
    renumber_members,
)
from api_service_model.entities.naming import safe_model_name, starting_with_uppercase
from api_service_model.model.filters import OverrideFilter
from api_service_model.model.walker import SchemaWalker
from api_service_model.parser.base import AllOfSchema, ObjectSchema, Parameter, Schema, StructureSchema

logger = logging.getLogger(__name__)


class OperationInputMembers(BaseModel):
    """Members of an operation's input, grouped by wire location."""

    query_members: dict[str, Member] = {}
    additional_header_members: dict[str, Member] = {}
    path_members: dict[str, Member] = {}
    body_structure_name: str | None = None

    @property
    def has_non_body_members(self) -> bool:
        return bool(self.query_members or self.additional_header_members or self.path_members)


class ParameterClassifier:
    """Sorts an operation's parameters into path, query, header and body groups."""

    def __init__(self, walker: SchemaWalker, override_filter: OverrideFilter):
        self.walker = walker
        self.filter = override_filter

    def classify(self, operation_name: str, parameters: list[Parameter]) -> OperationInputMembers:
        members = OperationInputMembers()

        for index, parameter in enumerate(parameters):
            if parameter.location == "body":
                members.body_structure_name = self._body_structure_name(operation_name, parameter.value_schema)
            elif parameter.location in ("query", "path", "header"):
                self._add_parameter_member(operation_name, index, parameter, members)
            else:
                raise UnsupportedConstruct(f"parameter location '{parameter.location}'", operation_name)

        return members

    def set_operation_input(
        self, operation_name: str, members: OperationInputMembers, description: OperationDescription
    ) -> None:
        """Set the operation's input structure and input description."""
        body_structure_name = members.body_structure_name

        if body_structure_name is not None and not members.has_non_body_members:
            self._body_structure(body_structure_name)
            description.input = body_structure_name
            description.input_description = OperationInputDescription(body_structure_name=body_structure_name)
            return

        all_members: dict[str, Member] = {}
        body_fields: list[str] = []
        if body_structure_name is not None:
            body_members = self._body_structure(body_structure_name).members
            all_members.update(body_members)
            body_fields = list(body_members)

        # earlier groups keep a key they already hold
        for group in (members.query_members, members.additional_header_members, members.path_members):
            for key, member in group.items():
                all_members.setdefault(key, member)

        input_name = f"{operation_name}Request"
        self.walker.register_structure(
            input_name,
            StructureDescription(
                members=renumber_members(all_members),
                documentation=f"Input model for the {operation_name} operation.",
            ),
        )
        description.input = input_name

        if members.query_members:
            default_location = DefaultInputLocation.QUERY
        else:
            default_location = DefaultInputLocation.BODY

        description.input_description = OperationInputDescription(
            path_fields=list(members.path_members),
            query_fields=list(members.query_members),
            body_fields=body_fields,
            additional_header_fields=list(members.additional_header_members),
            default_input_location=default_location,
            body_structure_name=body_structure_name,
        )

    def _body_structure_name(self, operation_name: str, schema: Schema) -> str:
        if isinstance(schema, StructureSchema):
            return schema.name
        elif isinstance(schema, ObjectSchema) and schema.additional_properties is not None:
            raise UnsupportedConstruct("map request body", operation_name)
        elif isinstance(schema, (ObjectSchema, AllOfSchema)):
            return self.walker.walk(schema, f"{operation_name}RequestBody")
        raise UnsupportedConstruct(f"{schema.type} request body", operation_name)

    def _add_parameter_member(
        self, operation_name: str, index: int, parameter: Parameter, members: OperationInputMembers
    ) -> None:
        if parameter.location == "header" and self.filter.ignore_request_header(operation_name, parameter.name):
            return

        type_name = starting_with_uppercase(safe_model_name(parameter.name))
        field_name = f"{operation_name}Request{type_name}"
        self.walker.add_field(parameter.value_schema, field_name)

        member = Member(
            value=field_name,
            position=index,
            required=parameter.required,
            documentation=parameter.description,
        )
        if parameter.location == "query":
            members.query_members[parameter.name] = member
        elif parameter.location == "path":
            members.path_members[parameter.name] = member
        else:
            members.additional_header_members[parameter.name] = member

    def _body_structure(self, name: str) -> StructureDescription:
        structure = self.walker.model.structure_descriptions.get(name)
        if structure is None:
            raise MissingReference(name, "request body structure")
        return structure
