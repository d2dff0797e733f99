from api_service_model.entities.model import (
    DefaultInputLocation,
    IntegerField,
    ListField,
    Member,
    OperationInputDescription,
    ServiceModel,
    StringField,
    StructureDescription,
    renumber_members,
    type_description,
)
from api_service_model.entities.naming import safe_model_name, starting_with_uppercase


class TestMember:
    def test_create_required_member(self):
        m = Member(value="WidgetId", position=0, required=True)
        assert m.value == "WidgetId"
        assert m.required is True
        assert m.location_name is None
        assert m.documentation is None

    def test_renumber_members_uses_key_order(self):
        members = {
            "b": Member(value="B", position=7),
            "a": Member(value="A", position=7),
            "c": Member(value="C", position=0),
        }
        renumbered = renumber_members(members)
        assert list(renumbered) == ["a", "b", "c"]
        assert [m.position for m in renumbered.values()] == [0, 1, 2]
        # the originals are untouched
        assert members["a"].position == 7


class TestFields:
    def test_type_description_is_kind_label(self):
        assert type_description(StringField()) == "String"
        assert type_description(ListField(type="Widget")) == "List"

    def test_fields_parse_by_kind(self):
        model = ServiceModel.model_validate({
            "field_descriptions": {
                "WidgetCount": {"kind": "Integer", "range_constraint": {"minimum": 0}},
                "Widgets": {"kind": "List", "type": "Widget"},
            }
        })
        assert isinstance(model.field_descriptions["WidgetCount"], IntegerField)
        assert model.field_descriptions["WidgetCount"].range_constraint.minimum == 0
        assert model.field_descriptions["Widgets"].type == "Widget"

    def test_defaults_are_not_shared(self):
        first = StringField()
        second = StringField()
        first.value_constraints.append(("a", "a"))
        assert second.value_constraints == []


class TestOperationInputDescription:
    def test_empty_description_only_has_default_location(self):
        description = OperationInputDescription()
        assert description.only_has_default_location is True
        assert description.default_input_location == DefaultInputLocation.BODY

    def test_any_group_disables_default_location(self):
        assert OperationInputDescription(query_fields=["limit"]).only_has_default_location is False
        assert OperationInputDescription(additional_header_fields=["X-Id"]).only_has_default_location is False
        assert OperationInputDescription(path_template_field="/a/{b}").only_has_default_location is False


class TestServiceModel:
    def test_normalized_type_name_uses_mapping(self):
        model = ServiceModel(type_mappings={"widget": "WidgetString"})
        assert model.get_normalized_type_name("widget") == "WidgetString"
        assert model.get_normalized_type_name("gadget") == "Gadget"

    def test_has_type(self):
        model = ServiceModel(
            structure_descriptions={"Widget": StructureDescription()},
            field_descriptions={"WidgetId": StringField()},
        )
        assert model.has_type("Widget")
        assert model.has_type("WidgetId")
        assert model.has_type("String")
        assert not model.has_type("Gadget")

    def test_error_types_serialize_sorted(self):
        model = ServiceModel(error_types={"b", "c", "a"})
        assert model.model_dump()["error_types"] == ["a", "b", "c"]


class TestNaming:
    def test_safe_model_name_strips_separators(self):
        assert safe_model_name("X-Next-Token") == "XNextToken"
        assert safe_model_name("page.size") == "pagesize"
        assert safe_model_name("a/b (c): d") == "abcd"

    def test_safe_model_name_keeps_wildcards_distinct(self):
        assert safe_model_name("Accept-*") == "AcceptStar"
        assert safe_model_name("Accept-*", replacement="_") == "Accept__Star"

    def test_starting_with_uppercase(self):
        assert starting_with_uppercase("listWidgets") == "ListWidgets"
        assert starting_with_uppercase("") == ""
