"""Recursive schema walker.

Each call registers exactly one field or structure for the schema it is
given and returns the name it was registered under. Anonymous nested
schemas are registered under names synthesized from the enclosing name.
"""

import logging

from api_service_model.entities.errors import MissingReference, UnsupportedConstruct
from api_service_model.entities.model import (
    BooleanField,
    DoubleField,
    Fields,
    IntegerField,
    LengthRangeConstraint,
    ListField,
    LongField,
    MapField,
    Member,
    NumericRangeConstraint,
    ServiceModel,
    StringField,
    StructureDescription,
    renumber_members,
)
from api_service_model.entities.naming import starting_with_uppercase
from api_service_model.entities.override import ModelOverride
from api_service_model.parser.base import (
    AllOfSchema,
    AnySchema,
    ArraySchema,
    BooleanSchema,
    EnumerationSchema,
    FileSchema,
    IntegerSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    Schema,
    StringSchema,
    StructureSchema,
)

logger = logging.getLogger(__name__)

FIELD_SCHEMAS = (BooleanSchema, IntegerSchema, NumberSchema, StringSchema, EnumerationSchema)


class SchemaWalker:
    """Registers the fields and structures of schema nodes into a ServiceModel."""

    def __init__(
        self,
        model: ServiceModel,
        definitions: dict[str, Schema],
        override: ModelOverride | None = None,
    ):
        self.model = model
        self.definitions = definitions
        self.override = override or ModelOverride()

    def walk(self, schema: Schema, entity_name: str) -> str:
        """Register `schema` under `entity_name` and return the name actually used.

        The returned name only differs from `entity_name` for arrays whose
        name had to be pluralized.
        """
        if isinstance(schema, BooleanSchema):
            self._register_field(entity_name, BooleanField())
        elif isinstance(schema, IntegerSchema):
            if schema.format == "int64":
                self._register_field(entity_name, LongField(range_constraint=_numeric_range(schema)))
            else:
                self._register_field(entity_name, IntegerField(range_constraint=_numeric_range(schema)))
        elif isinstance(schema, NumberSchema):
            self._register_field(entity_name, DoubleField(range_constraint=_numeric_range(schema)))
        elif isinstance(schema, StringSchema):
            self._register_field(entity_name, self._string_field(schema))
        elif isinstance(schema, EnumerationSchema):
            self._register_field(entity_name, StringField(value_constraints=_enumeration_values(schema.enum)))
        elif isinstance(schema, StructureSchema):
            structure = StructureDescription(documentation=schema.description)
            self.walk_structure_reference(schema, entity_name, structure)
            self.register_structure(entity_name, structure)
        elif isinstance(schema, ObjectSchema):
            if schema.additional_properties is not None:
                self._walk_map(schema.additional_properties, entity_name)
            else:
                structure = StructureDescription(documentation=schema.description)
                self.walk_object(schema, entity_name, structure)
                self.register_structure(entity_name, structure)
        elif isinstance(schema, ArraySchema):
            entity_name = self._walk_array(schema, entity_name)
        elif isinstance(schema, AllOfSchema):
            self._walk_all_of(schema, entity_name)
        elif isinstance(schema, (FileSchema, AnySchema, NullSchema, OneOfSchema)):
            raise UnsupportedConstruct(f"{schema.type} schema", entity_name)
        else:
            raise UnsupportedConstruct(f"unknown schema kind {type(schema).__name__}", entity_name)

        return entity_name

    def add_field(self, schema: Schema, field_name: str) -> None:
        """Register a parameter or header field; only scalar and enumeration schemas are allowed."""
        if not isinstance(schema, FIELD_SCHEMAS):
            raise UnsupportedConstruct(f"{schema.type} schema for a parameter or header", field_name)
        self.walk(schema, field_name)

    def walk_object(self, schema: ObjectSchema, entity_name: str, structure: StructureDescription) -> None:
        """Add a member to `structure` for each property, in ascending key order."""
        for index, name in enumerate(sorted(schema.properties)):
            property_schema = schema.properties[name]

            if isinstance(property_schema, StructureSchema):
                value = property_schema.name
            else:
                value = self.walk(property_schema, entity_name + starting_with_uppercase(name))

            # a later allOf subschema replaces an earlier member of the same name
            structure.members[name] = Member(
                value=value,
                position=index,
                required=name in schema.required,
                documentation=property_schema.description,
            )

    def walk_structure_reference(
        self, schema: StructureSchema, entity_name: str, structure: StructureDescription
    ) -> None:
        """Walk a referenced definition as if it were declared in place."""
        target = self.resolve(schema)
        if not isinstance(target, ObjectSchema):
            raise UnsupportedConstruct(
                f"direct reference to non-object definition '{schema.name}' ({target.type})", entity_name
            )
        if structure.documentation is None:
            structure.documentation = target.description
        self.walk_object(target, entity_name, structure)

    def resolve(self, schema: StructureSchema) -> Schema:
        if schema.name not in self.definitions:
            raise MissingReference(schema.name, "schema definitions")
        return self.definitions[schema.name]

    def _walk_map(self, value_schema: Schema, entity_name: str) -> None:
        if isinstance(value_schema, StructureSchema):
            value_type = value_schema.name
        elif isinstance(value_schema, StringSchema):
            value_type = "String"
        else:
            value_type = self.walk(value_schema, f"{entity_name}Value")

        self._register_field(entity_name, MapField(key_type="String", value_type=value_type))

    def _walk_array(self, schema: ArraySchema, entity_name: str) -> str:
        if len(schema.items) != 1:
            raise UnsupportedConstruct("array with more than one item schema", entity_name)
        item = schema.items[0]

        if isinstance(item, StructureSchema):
            element_type = item.name
        else:
            if entity_name[-1:].lower() == "s":
                element_name = entity_name[:-1]
            else:
                element_name = entity_name
                entity_name = f"{entity_name}s"
            element_type = self.walk(item, element_name)

        length = LengthRangeConstraint(minimum=schema.min_items, maximum=schema.max_items)
        self._register_field(entity_name, ListField(type=element_type, length_constraint=length))
        return entity_name

    def _walk_all_of(self, schema: AllOfSchema, entity_name: str) -> None:
        structure = StructureDescription(documentation=schema.description)

        for index, subschema in enumerate(schema.subschemas):
            subschema_name = f"{entity_name}{index + 1}"
            if isinstance(subschema, StructureSchema):
                self.walk_structure_reference(subschema, subschema_name, structure)
            elif isinstance(subschema, ObjectSchema):
                self.walk_object(subschema, subschema_name, structure)
            else:
                raise UnsupportedConstruct(f"{subschema.type} subschema in allOf", entity_name)

        structure.members = renumber_members(structure.members)
        self.register_structure(entity_name, structure)

    def _string_field(self, schema: StringSchema) -> StringField:
        length = LengthRangeConstraint(minimum=schema.min_length, maximum=schema.max_length)
        pattern = schema.pattern

        if (
            self.override.model_string_patterns_are_alternative_list
            and pattern is not None
            and len(pattern) >= 2
            and pattern.startswith("^")
            and pattern.endswith("$")
        ):
            alternatives = [value for value in pattern[1:-1].split("|") if value]
            return StringField(
                length_constraint=length,
                value_constraints=[(value, value) for value in alternatives],
            )

        return StringField(
            regex_constraint=pattern,
            length_constraint=length,
            value_constraints=_enumeration_values(schema.enum),
        )

    def _register_field(self, name: str, field: Fields) -> None:
        logger.debug("Registering %s field %s", field.kind, name)
        self.model.field_descriptions[name] = field

    def register_structure(self, name: str, structure: StructureDescription) -> None:
        logger.debug("Registering structure %s with %d members", name, len(structure.members))
        self.model.structure_descriptions[name] = structure


def _numeric_range(schema: IntegerSchema | NumberSchema) -> NumericRangeConstraint:
    return NumericRangeConstraint(
        minimum=schema.minimum,
        maximum=schema.maximum,
        exclusive_minimum=schema.exclusive_minimum,
        exclusive_maximum=schema.exclusive_maximum,
    )


def _enumeration_values(values: list | None) -> list[tuple[str, str]]:
    """String enumeration values as (name, value) pairs; other values are dropped."""
    if not values:
        return []
    return [(value, value) for value in values if isinstance(value, str)]
