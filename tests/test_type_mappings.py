from api_service_model.entities.model import IntegerField, ListField, StringField, StructureDescription
from api_service_model.model.type_mappings import get_type_mappings, group_type_names


class TestGroupTypeNames:
    def test_groups_by_normalized_name_then_label(self):
        groups = group_type_names([("widget", "String"), ("Widget", ""), ("gadget", "Integer")])
        assert groups == {"Widget": {"String": ["widget"], "": ["Widget"]}, "Gadget": {"Integer": ["gadget"]}}


class TestGetTypeMappings:
    def test_no_collisions(self):
        assert get_type_mappings({"Widget": StructureDescription()}, {"WidgetId": StringField()}) == {}

    def test_different_labels_get_label_suffix(self):
        mappings = get_type_mappings({"Widget": StructureDescription()}, {"widget": StringField()})
        assert mappings == {"Widget": "Widget", "widget": "WidgetString"}

    def test_same_label_gets_positional_suffix(self):
        mappings = get_type_mappings({"widget": StructureDescription(), "Widget": StructureDescription()}, {})
        assert mappings == {"Widget": "Widget1", "widget": "Widget2"}

    def test_label_suffix_only_within_colliding_group(self):
        mappings = get_type_mappings(
            {"Count": StructureDescription()},
            {"count": IntegerField(), "count_": IntegerField()},
        )
        # "count_" normalizes to "Count_" and is not part of the group
        assert mappings == {"Count": "Count", "count": "CountInteger"}

    def test_string_group_keeps_builtin_name(self):
        mappings = get_type_mappings({}, {"string": StringField(), "String": StringField()})
        assert mappings["string"] == "String"
        assert mappings["String"] == "String"

    def test_string_group_with_other_labels_is_decorated(self):
        mappings = get_type_mappings({"String": StructureDescription()}, {"string": StringField()})
        assert mappings == {"String": "String", "string": "StringString"}

    def test_only_case_collisions_are_mapped(self):
        fields = {"item": StringField(), "iTem": IntegerField(), "items": ListField(type="item")}
        mappings = get_type_mappings({"Item": StructureDescription()}, fields)
        # "iTem" normalizes to "ITem"
        assert mappings == {"Item": "Item", "item": "ItemString"}

    def test_result_does_not_depend_on_insertion_order(self):
        fields = {"widget": StringField(), "Widget": IntegerField(), "wIdget": StringField()}
        reversed_fields = dict(reversed(list(fields.items())))
        assert get_type_mappings({}, fields) == get_type_mappings({}, reversed_fields)
