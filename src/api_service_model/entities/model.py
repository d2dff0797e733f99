"""Normalized service model produced from a parsed API document.

Structures, fields and operations reference each other by name only.
Every member value and list/map element type names a registered field,
a registered structure, or one of the builtin type labels.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_serializer

from api_service_model.entities.naming import is_builtin_type, starting_with_uppercase


class LengthRangeConstraint(BaseModel):
    """A potentially half or fully open length range."""

    minimum: int | None = None
    maximum: int | None = None

    @property
    def has_constraints(self) -> bool:
        return self.minimum is not None or self.maximum is not None


class NumericRangeConstraint(BaseModel):
    """A potentially half or fully open numeric range."""

    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False

    @property
    def has_constraints(self) -> bool:
        return self.minimum is not None or self.maximum is not None


class StringField(BaseModel):
    kind: Literal["String"] = "String"
    regex_constraint: str | None = None
    length_constraint: LengthRangeConstraint = LengthRangeConstraint()
    value_constraints: list[tuple[str, str]] = []  # (name, value)


class IntegerField(BaseModel):
    kind: Literal["Integer"] = "Integer"
    range_constraint: NumericRangeConstraint = NumericRangeConstraint()


class LongField(BaseModel):
    kind: Literal["Long"] = "Long"
    range_constraint: NumericRangeConstraint = NumericRangeConstraint()


class BooleanField(BaseModel):
    kind: Literal["Boolean"] = "Boolean"


class DoubleField(BaseModel):
    kind: Literal["Double"] = "Double"
    range_constraint: NumericRangeConstraint = NumericRangeConstraint()


class TimestampField(BaseModel):
    kind: Literal["Timestamp"] = "Timestamp"


class ListField(BaseModel):
    kind: Literal["List"] = "List"
    type: str
    length_constraint: LengthRangeConstraint = LengthRangeConstraint()


class MapField(BaseModel):
    kind: Literal["Map"] = "Map"
    key_type: str
    value_type: str
    length_constraint: LengthRangeConstraint = LengthRangeConstraint()


class DataField(BaseModel):
    kind: Literal["Data"] = "Data"


Fields = Annotated[
    Union[
        StringField,
        IntegerField,
        LongField,
        BooleanField,
        DoubleField,
        TimestampField,
        ListField,
        MapField,
        DataField,
    ],
    Field(discriminator="kind"),
]


def type_description(field: Fields) -> str:
    """The semantic label of a field, e.g. "String" or "List"."""
    return field.kind


class Member(BaseModel):
    """A named, ordered slot inside a structure."""

    value: str
    position: int
    location_name: str | None = None
    required: bool = False
    documentation: str | None = None


class StructureDescription(BaseModel):
    members: dict[str, Member] = {}
    documentation: str | None = None


def renumber_members(members: dict[str, Member]) -> dict[str, Member]:
    """Reassign positions 0..N-1 in ascending member-key order."""
    return {
        key: members[key].model_copy(update={"position": position})
        for position, key in enumerate(sorted(members))
    }


class DefaultInputLocation(str, Enum):
    QUERY = "Query"
    BODY = "Body"


class OperationInputDescription(BaseModel):
    path_fields: list[str] = []
    query_fields: list[str] = []
    body_fields: list[str] = []
    path_template_field: str | None = None
    additional_header_fields: list[str] = []
    default_input_location: DefaultInputLocation = DefaultInputLocation.BODY
    body_structure_name: str | None = None
    payload_as_member: str | None = None

    @property
    def only_has_default_location(self) -> bool:
        return (
            not self.path_fields
            and not self.query_fields
            and not self.body_fields
            and self.path_template_field is None
            and not self.additional_header_fields
        )


class OperationOutputDescription(BaseModel):
    body_fields: list[str] = []
    header_fields: list[str] = []
    body_structure_name: str | None = None
    payload_as_member: str | None = None


class OperationDescription(BaseModel):
    input: str | None = None
    output: str | None = None
    http_verb: str | None = None
    http_url: str | None = None
    errors: list[tuple[str, int]] = []  # (error type name, status code)
    documentation: str | None = None
    input_description: OperationInputDescription = OperationInputDescription()
    output_description: OperationOutputDescription = OperationOutputDescription()


class ServiceModel(BaseModel):
    """Aggregate root for one normalized document."""

    structure_descriptions: dict[str, StructureDescription] = {}
    field_descriptions: dict[str, Fields] = {}
    operation_descriptions: dict[str, OperationDescription] = {}
    error_types: set[str] = set()
    type_mappings: dict[str, str] = {}

    @field_serializer("error_types")
    def _serialize_error_types(self, error_types: set[str]) -> list[str]:
        return sorted(error_types)

    def has_type(self, name: str) -> bool:
        """Whether `name` is a registered structure or field, or a builtin type label."""
        return is_builtin_type(name) or name in self.structure_descriptions or name in self.field_descriptions

    def get_normalized_type_name(self, name: str) -> str:
        """The external name for a type: its mapping, or the name starting with an uppercase."""
        if name in self.type_mappings:
            return self.type_mappings[name]
        return starting_with_uppercase(name)
