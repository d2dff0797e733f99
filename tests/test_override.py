from pathlib import Path

from api_service_model.entities.override import ModelOverride, load_override

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadOverride:
    def test_load_yaml_override(self):
        override = load_override(FIXTURES / "override.yaml")
        assert override.ignore_request_headers == {"*.X-Trace-Id"}
        assert override.ignore_operations == {"createPets.post"}
        assert override.model_string_patterns_are_alternative_list is True
        assert override.ignore_response_headers is None

    def test_load_json_override(self, tmp_path):
        f = tmp_path / "override.json"
        f.write_text('{"ignoreResponseHeaders": ["*.*.ETag"], "customEmitterSetting": 3}')
        override = load_override(f)
        assert override.ignore_response_headers == {"*.*.ETag"}
        # settings for other consumers are kept
        assert override.model_extra["customEmitterSetting"] == 3

    def test_empty_file_gives_defaults(self, tmp_path):
        f = tmp_path / "override.yaml"
        f.write_text("")
        override = load_override(f)
        assert override.model_string_patterns_are_alternative_list is False
        assert override.ignore_operations is None


class TestModelOverride:
    def test_populate_by_field_name(self):
        override = ModelOverride(ignore_operations=["listWidgets.get"])
        assert override.ignore_operations == {"listWidgets.get"}

    def test_coding_key_override_prefers_wildcard(self):
        override = ModelOverride(codingKeyOverrides={"*.id": "ID", "Widget.id": "widgetId", "Widget.name": "Name"})
        assert override.get_coding_key_override("id", "Widget") == "ID"
        assert override.get_coding_key_override("name", "Widget") == "Name"
        assert override.get_coding_key_override("name") is None

    def test_required_override(self):
        override = ModelOverride(requiredOverrides={"Widget.count": False})
        assert override.get_is_required_override("count", "Widget") is False
        assert override.get_is_required_override("count", "Gadget") is None
        assert ModelOverride().get_is_required_override("count", "Widget") is None

    def test_raw_type_override(self):
        override = ModelOverride.model_validate(
            {"fieldRawTypeOverride": {"Long": {"typeName": "Int64", "defaultValue": "0"}}}
        )
        assert override.field_raw_type_override["Long"].type_name == "Int64"
