"""
Template Engine for API URLs

Resolves the path of a v3 operation from its URL template.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Any, Iterable, List, Mapping
from urllib.parse import quote

from ..errors import UnknownOperationError, ValidationError


VARIABLE_PATTERN = re.compile(r'\{(\w+)\}')

# Supplied by the executor, never by the caller
BUILTIN_VARIABLES = frozenset({"version", "resource"})


def quote_path_segment(value: Any) -> str:
    """Encode an id so it stays a single path segment"""
    segment = quote(str(value), safe="")
    # dot segments would be collapsed by the server or the transport
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


@dataclass(frozen=True)
class URLTemplate:
    """
    A path template such as ``/{version}/{resource}/{survey_id}/details``.

    Calling the template with the API version, the resource and the id
    values returns the rendered path.
    """
    pattern: str

    @property
    def variables(self) -> frozenset:
        return frozenset(VARIABLE_PATTERN.findall(self.pattern))

    @property
    def id_variables(self) -> frozenset:
        return self.variables - BUILTIN_VARIABLES

    def __call__(self, version: str, resource: str, id_values: Mapping[str, Any]) -> str:
        values = dict(id_values)
        values["version"] = version
        values["resource"] = resource

        missing = sorted(
            name for name in self.variables
            if values.get(name) is None or values.get(name) == ""
        )
        if missing:
            raise ValidationError(
                f"Missing path parameters for {self.pattern}",
                [f"'{name}' is required" for name in missing]
            )

        def replace_var(match):
            name = match.group(1)
            if name in BUILTIN_VARIABLES:
                return str(values[name])
            return quote_path_segment(values[name])

        return VARIABLE_PATTERN.sub(replace_var, self.pattern)


URL_TEMPLATES: Mapping[str, URLTemplate] = MappingProxyType({
    "responses_bulk": URLTemplate("/{version}/{resource}/{survey_id}/responses/bulk"),
    "responses": URLTemplate("/{version}/{resource}/{survey_id}/responses"),
    "get_responses": URLTemplate("/{version}/{resource}/{survey_id}"),
    "get_survey_details": URLTemplate("/{version}/{resource}/{survey_id}/details"),
    "get_survey_list": URLTemplate("/{version}/{resource}"),
    "get_collector_list": URLTemplate("/{version}/{resource}/{survey_id}/collectors"),
    "create_collector": URLTemplate("/{version}/{resource}/{survey_id}/collectors"),
    "get_response_counts": URLTemplate("/{version}/{resource}/{collector_id}/responses"),
    "get_user_details": URLTemplate("/{version}/{resource}/me"),
})


def get_template(operation_key: str) -> URLTemplate:
    """Look up the template for an operation key"""
    try:
        return URL_TEMPLATES[operation_key]
    except KeyError:
        raise UnknownOperationError(operation_key) from None


def resolve_path(operation_key: str, version: str, resource: str,
                 id_values: Mapping[str, Any]) -> str:
    return get_template(operation_key)(version, resource, id_values)


def validate_templates(operations: Iterable) -> List[str]:
    """
    Check that every operation has a template and that the template only
    uses variables the operation declares as id fields.

    Raises:
        UnknownOperationError: an operation key has no template
        ValidationError: a template variable is not among the id fields
    """
    operations = list(operations)
    for operation in operations:
        get_template(operation.name)
    needed = extract_variables({op.name: URL_TEMPLATES[op.name] for op in operations})

    errors = []
    checked = []
    for operation in operations:
        undeclared = needed[operation.name] - set(operation.id_fields)
        if undeclared:
            errors.append(
                f"{operation.name}: template needs {', '.join(sorted(undeclared))}"
            )
        checked.append(operation.name)

    if errors:
        raise ValidationError("URL templates do not match operations", errors)
    return checked


def extract_variables(templates: Mapping[str, URLTemplate] = URL_TEMPLATES) -> Dict[str, frozenset]:
    """Map each operation key to the id variables its template needs"""
    return {key: template.id_variables for key, template in templates.items()}
