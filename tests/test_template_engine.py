"""
Tests for the v3 URL template table
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from surveymonkey.adapters.base import Operation
from surveymonkey.adapters.template_engine import (
    URL_TEMPLATES, URLTemplate, extract_variables, get_template,
    resolve_path, validate_templates
)
from surveymonkey.adapters.v3 import OPERATIONS
from surveymonkey.errors import UnknownOperationError, ValidationError


class TestURLTemplate:

    def test_render(self):
        template = URLTemplate("/{version}/{resource}/{survey_id}/details")
        assert template("v3", "surveys", {"survey_id": "123"}) == "/v3/surveys/123/details"

    def test_ids_are_stringified(self):
        template = URLTemplate("/{version}/{resource}/{collector_id}/responses")
        assert template("v3", "collectors", {"collector_id": 42}) == "/v3/collectors/42/responses"

    def test_missing_id_raises(self):
        template = URLTemplate("/{version}/{resource}/{survey_id}/details")
        with pytest.raises(ValidationError) as exc_info:
            template("v3", "surveys", {})
        assert "'survey_id' is required" in exc_info.value.errors

    def test_empty_id_raises(self):
        template = URLTemplate("/{version}/{resource}/{survey_id}")
        with pytest.raises(ValidationError):
            template("v3", "surveys", {"survey_id": ""})

    def test_id_variables_exclude_builtins(self):
        template = URLTemplate("/{version}/{resource}/{survey_id}/responses/bulk")
        assert template.id_variables == frozenset({"survey_id"})

    def test_ids_stay_one_path_segment(self):
        template = URLTemplate("/{version}/{resource}/{survey_id}/details")
        path = template("v3", "surveys", {"survey_id": "a/b?c#d"})
        assert path == "/v3/surveys/a%2Fb%3Fc%23d/details"

    @pytest.mark.parametrize("survey_id, expected", [
        ("..", "/v3/surveys/%2E%2E/details"),
        (".", "/v3/surveys/%2E/details"),
        ("../users/me?x=1#", "/v3/surveys/..%2Fusers%2Fme%3Fx%3D1%23/details"),
        ("a b", "/v3/surveys/a%20b/details"),
    ])
    def test_ids_cannot_escape_the_template(self, survey_id, expected):
        template = URLTemplate("/{version}/{resource}/{survey_id}/details")
        assert template("v3", "surveys", {"survey_id": survey_id}) == expected


class TestTemplateTable:

    @pytest.mark.parametrize("key, resource, ids, expected", [
        ("responses_bulk", "surveys", {"survey_id": "1"}, "/v3/surveys/1/responses/bulk"),
        ("responses", "surveys", {"survey_id": "1"}, "/v3/surveys/1/responses"),
        ("get_responses", "responses", {"survey_id": "1"}, "/v3/responses/1"),
        ("get_survey_details", "surveys", {"survey_id": "1"}, "/v3/surveys/1/details"),
        ("get_survey_list", "surveys", {}, "/v3/surveys"),
        ("get_collector_list", "surveys", {"survey_id": "1"}, "/v3/surveys/1/collectors"),
        ("create_collector", "surveys", {"survey_id": "1"}, "/v3/surveys/1/collectors"),
        ("get_response_counts", "collectors", {"collector_id": "9"}, "/v3/collectors/9/responses"),
        ("get_user_details", "users", {}, "/v3/users/me"),
    ])
    def test_resolve_path(self, key, resource, ids, expected):
        assert resolve_path(key, "v3", resource, ids) == expected

    def test_table_is_immutable(self):
        with pytest.raises(TypeError):
            URL_TEMPLATES["new"] = URLTemplate("/{version}/new")

    def test_unknown_key_fails_fast(self):
        with pytest.raises(UnknownOperationError):
            get_template("get_everything")

    def test_extract_variables(self):
        variables = extract_variables()
        assert variables["get_response_counts"] == frozenset({"collector_id"})
        assert variables["get_user_details"] == frozenset()


class TestValidateTemplates:

    def test_every_v3_operation_has_a_template(self):
        checked = validate_templates(OPERATIONS)
        assert set(checked) == {op.name for op in OPERATIONS}

    def test_missing_template_is_reported(self):
        with pytest.raises(UnknownOperationError):
            validate_templates([Operation("not_in_table", "surveys")])

    def test_undeclared_id_field_is_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_templates([Operation("get_survey_details", "surveys")])
        assert "survey_id" in str(exc_info.value)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
