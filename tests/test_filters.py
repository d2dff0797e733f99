import pytest

from api_service_model.entities.override import ModelOverride
from api_service_model.model.filters import (
    OPERATION_COMBINATIONS,
    OverrideFilter,
    matches_any,
)


class TestMatchesAny:
    def test_no_patterns_never_match(self):
        assert matches_any(None, ("op", "get"), OPERATION_COMBINATIONS) is False
        assert matches_any(set(), ("op", "get"), OPERATION_COMBINATIONS) is False

    def test_missing_key_only_matches_wildcard(self):
        assert matches_any({"None.get"}, (None, "get"), OPERATION_COMBINATIONS) is False
        assert matches_any({"*.get"}, (None, "get"), OPERATION_COMBINATIONS) is True

    def test_unmatched_pattern_has_no_effect(self):
        assert matches_any({"not a pattern", "a.b.c.d"}, ("op", "get"), OPERATION_COMBINATIONS) is False


class TestOperationFilter:
    @pytest.mark.parametrize("pattern", ["listWidgets.get", "*.get", "listWidgets.*", "*.*"])
    def test_each_pattern_suppresses(self, pattern):
        f = OverrideFilter(ModelOverride(ignore_operations=[pattern]))
        assert f.ignore_operation("listWidgets", "get") is True

    def test_other_operations_pass(self):
        f = OverrideFilter(ModelOverride(ignore_operations=["listWidgets.get", "*.delete"]))
        assert f.ignore_operation("listWidgets", "post") is False
        assert f.ignore_operation("getWidget", "get") is False

    def test_no_override(self):
        assert OverrideFilter().ignore_operation("listWidgets", "get") is False


class TestRequestHeaderFilter:
    def test_operation_wildcard_suppresses_only_that_operation(self):
        f = OverrideFilter(ModelOverride(ignore_request_headers=["listWidgets.*"]))
        assert f.ignore_request_header("listWidgets", "X-Trace-Id") is True
        assert f.ignore_request_header("listWidgets", "Authorization") is True
        assert f.ignore_request_header("getWidget", "X-Trace-Id") is False

    @pytest.mark.parametrize("pattern", ["*.*", "*.X-Trace-Id", "listWidgets.X-Trace-Id", "listWidgets.*"])
    def test_each_pattern_suppresses(self, pattern):
        f = OverrideFilter(ModelOverride(ignore_request_headers=[pattern]))
        assert f.ignore_request_header("listWidgets", "X-Trace-Id") is True


class TestResponseHeaderFilter:
    @pytest.mark.parametrize(
        "pattern",
        [
            "*.*.*",
            "*.*.X-Next-Token",
            "*.200.*",
            "listWidgets.200.X-Next-Token",
            "listWidgets.*.X-Next-Token",
            "listWidgets.200.*",
        ],
    )
    def test_each_checked_pattern_suppresses(self, pattern):
        f = OverrideFilter(ModelOverride(ignore_response_headers=[pattern]))
        assert f.ignore_response_header("listWidgets", 200, "X-Next-Token") is True

    def test_wildcard_operation_with_exact_code_and_header_is_not_checked(self):
        f = OverrideFilter(ModelOverride(ignore_response_headers=["*.200.X-Next-Token"]))
        assert f.ignore_response_header("listWidgets", 200, "X-Next-Token") is False

    def test_operation_with_wildcard_code_and_header_is_not_checked(self):
        f = OverrideFilter(ModelOverride(ignore_response_headers=["listWidgets.*.*"]))
        assert f.ignore_response_header("listWidgets", 200, "X-Next-Token") is False

    def test_filter_response_headers_sorts_and_drops(self):
        f = OverrideFilter(ModelOverride(ignore_response_headers=["*.*.ETag"]))
        headers = {"X-B": 2, "ETag": 1, "X-A": 3}
        assert list(f.filter_response_headers("op", 200, headers)) == ["X-A", "X-B"]
