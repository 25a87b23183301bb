"""
SurveyMonkey API v3 Adapter

Resource style API: the URL path depends on the operation and carries the
survey or collector id. The OAuth access token travels as a bearer header.
"""

from typing import Any, Dict, Iterable, Optional

from .base import Callback, Operation, SurveyMonkeyAdapter
from .template_engine import resolve_path, validate_templates
from ..config_manager import ClientOptions
from ..errors import ApiError, create_api_error

# Methods whose remaining parameters go in a JSON body instead of the query
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


RESPONDENT_LIST_BULK = Operation("responses_bulk", "surveys", id_fields=("survey_id",))
RESPONDENT_LIST = Operation("responses", "surveys", id_fields=("survey_id",))
RESPONSES = Operation("get_responses", "responses", id_fields=("survey_id",))
SURVEY_DETAILS = Operation("get_survey_details", "surveys", id_fields=("survey_id",))
SURVEY_LIST = Operation("get_survey_list", "surveys")
COLLECTOR_LIST = Operation("get_collector_list", "surveys", id_fields=("survey_id",))
CREATE_COLLECTOR = Operation(
    "create_collector", "surveys", http_method="POST", id_fields=("survey_id",)
)
RESPONSE_COUNTS = Operation("get_response_counts", "collectors", id_fields=("collector_id",))
USER_DETAILS = Operation("get_user_details", "users")

OPERATIONS = (
    RESPONDENT_LIST_BULK,
    RESPONDENT_LIST,
    RESPONSES,
    SURVEY_DETAILS,
    SURVEY_LIST,
    COLLECTOR_LIST,
    CREATE_COLLECTOR,
    RESPONSE_COUNTS,
    USER_DETAILS,
)

validate_templates(OPERATIONS)


def serialize_query(params: Dict) -> Dict[str, str]:
    """Flatten values for the query string (lists become comma separated)"""
    query = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, tuple, set)):
            value = ",".join(str(item) for item in value)
        query[key] = str(value)
    return query


class SurveyMonkeyAPIv3(SurveyMonkeyAdapter):
    """
    SurveyMonkey API v3 client.

    Should be built through ``surveymonkey.create_client`` rather than
    instantiated directly.
    """

    version = "v3"

    def __init__(self, access_token: str, options: Optional[ClientOptions] = None):
        super().__init__(options)
        self.access_token = access_token

    @property
    def bearer_token(self) -> str:
        return self.access_token

    def build_request(self, operation: Operation, params: Dict) -> Dict:
        id_values = {name: params.get(name) for name in operation.id_fields}
        path = resolve_path(operation.name, self.version, operation.resource, id_values)

        remaining = {k: v for k, v in params.items() if k not in operation.id_fields}
        method = operation.http_method.upper()

        request_info = {
            "url": f"{self.url_config.get_service_base_url()}{path}",
            "method": method,
            "headers": self.get_headers(),
        }
        if method in BODY_METHODS:
            request_info["json"] = remaining
        else:
            request_info["params"] = serialize_query(remaining)
        return request_info

    def extract_api_error(self, data: Any) -> Optional[ApiError]:
        if not isinstance(data, dict):
            return None
        error = data.get("error")
        if not error:
            return None
        if isinstance(error, dict):
            message = error.get("message") or error.get("name") or ""
            code = error.get("id", error.get("code"))
        else:
            message = str(error)
            code = data.get("code")
        return create_api_error(message, code, data, self.version)

    def execute(self, http_method: str, resource: str, operation_key: str,
                id_fields: Iterable[str] = (), given_params: Any = None,
                callback: Optional[Callback] = None):
        """
        Send a v3 request for ``operation_key``.

        ``id_fields`` name the parameters that fill the URL path; every other
        parameter is forwarded as is.
        """
        operation = Operation(
            operation_key, resource,
            http_method=http_method, id_fields=tuple(id_fields)
        )
        return self.call(operation, given_params, callback)

    # ==========================================
    # Survey Related Methods
    # ==========================================

    def get_respondent_list_bulk(self, params=None, callback=None):
        """Responses of a survey with full answer data"""
        return self.call(RESPONDENT_LIST_BULK, params, callback)

    def get_respondent_list(self, params=None, callback=None):
        """Paged list of responses for a survey"""
        return self.call(RESPONDENT_LIST, params, callback)

    def get_responses(self, params=None, callback=None):
        return self.call(RESPONSES, params, callback)

    def get_survey_details(self, params=None, callback=None):
        """A survey's pages, questions and metadata"""
        return self.call(SURVEY_DETAILS, params, callback)

    def get_survey_list(self, params=None, callback=None):
        """Paged list of surveys in the user's account"""
        return self.call(SURVEY_LIST, params, callback)

    def get_collector_list(self, params=None, callback=None):
        return self.call(COLLECTOR_LIST, params, callback)

    def create_collector(self, params=None, callback=None):
        """Create a collector on a survey; other params form the JSON body"""
        return self.call(CREATE_COLLECTOR, params, callback)

    def get_response_counts(self, params=None, callback=None):
        return self.call(RESPONSE_COUNTS, params, callback)

    def get_user_details(self, params=None, callback=None):
        return self.call(USER_DETAILS, params, callback)
