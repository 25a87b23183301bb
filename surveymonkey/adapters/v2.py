"""
SurveyMonkey API v2 Adapter

RPC style API: every method is a POST to ``/v2/{resource}/{method}`` with
the API key in the query string and the whitelisted parameters as a JSON
body.
"""

from typing import Any, Dict, Iterable, Optional
from urllib.parse import urlencode

from .base import Callback, Operation, SurveyMonkeyAdapter
from ..config_manager import ClientOptions
from ..errors import ApiError, create_api_error


def _operation(resource: str, method: str, params: Iterable[str] = ()) -> Operation:
    return Operation(
        name=method,
        resource=resource,
        allowed_params=frozenset(params),
        http_method="POST"
    )


RESPONDENT_LIST = _operation("surveys", "get_respondent_list", [
    "survey_id",
    "fields",
    "collector_id",
    "page",
    "page_size",
    "start_date",
    "end_date",
    "start_modified_date",
    "end_modified_date",
    "order_asc",
    "order_by",
])

RESPONSES = _operation("surveys", "get_responses", [
    "survey_id",
    "respondent_ids",
])

SURVEY_DETAILS = _operation("surveys", "get_survey_details", [
    "survey_id",
])

SURVEY_LIST = _operation("surveys", "get_survey_list", [
    "page",
    "page_size",
    "start_date",
    "end_date",
    "title",
    "recipient_email",
    "order_asc",
    "fields",
])

COLLECTOR_LIST = _operation("surveys", "get_collector_list", [
    "survey_id",
    "page",
    "page_size",
    "start_date",
    "end_date",
    "name",
    "order_asc",
    "fields",
])

RESPONSE_COUNTS = _operation("surveys", "get_response_counts", [
    "collector_id",
])

USER_DETAILS = _operation("user", "get_user_details")

CREATE_COLLECTOR = _operation("collectors", "create_collector", [
    "survey_id",
    "collector",
])

OPERATIONS = (
    RESPONDENT_LIST,
    RESPONSES,
    SURVEY_DETAILS,
    SURVEY_LIST,
    COLLECTOR_LIST,
    RESPONSE_COUNTS,
    USER_DETAILS,
    CREATE_COLLECTOR,
)


class SurveyMonkeyAPIv2(SurveyMonkeyAdapter):
    """
    SurveyMonkey API v2 client.

    Should be built through ``surveymonkey.create_client`` rather than
    instantiated directly.
    """

    version = "v2"

    def __init__(self, api_key: str, options: Optional[ClientOptions] = None):
        super().__init__(options)
        self.api_key = api_key

    @property
    def bearer_token(self) -> str:
        return self.options.access_token or ""

    def build_request(self, operation: Operation, params: Dict) -> Dict:
        final_params = {
            name: params[name] for name in operation.allowed_params if name in params
        }
        query = urlencode({"api_key": self.api_key})
        return {
            "url": f"{self.base_url}/{operation.resource}/{operation.name}?{query}",
            "method": operation.http_method,
            "headers": self.get_headers(),
            "json": final_params,
        }

    def extract_api_error(self, data: Any) -> Optional[ApiError]:
        if isinstance(data, dict) and data.get("errmsg"):
            return create_api_error(data["errmsg"], data.get("status"), data, self.version)
        return None

    def execute(self, resource: str, method: str, available_params: Iterable[str],
                given_params: Any = None, callback: Optional[Callback] = None):
        """
        Send a v2 request, forwarding only the parameters in
        ``available_params``.
        """
        return self.call(_operation(resource, method, available_params), given_params, callback)

    # ==========================================
    # Survey Related Methods
    # ==========================================

    def get_respondent_list(self, params=None, callback=None):
        """Paged list of respondents for a survey and optionally a collector"""
        return self.call(RESPONDENT_LIST, params, callback)

    def get_responses(self, params=None, callback=None):
        """Responses for a list of respondent ids"""
        return self.call(RESPONSES, params, callback)

    def get_survey_details(self, params=None, callback=None):
        return self.call(SURVEY_DETAILS, params, callback)

    def get_survey_list(self, params=None, callback=None):
        """Paged list of surveys in the user's account"""
        return self.call(SURVEY_LIST, params, callback)

    def get_collector_list(self, params=None, callback=None):
        return self.call(COLLECTOR_LIST, params, callback)

    def get_response_counts(self, params=None, callback=None):
        """How many respondents started and/or completed the survey for a collector"""
        return self.call(RESPONSE_COUNTS, params, callback)

    def get_user_details(self, params=None, callback=None):
        return self.call(USER_DETAILS, params, callback)

    def create_collector(self, params=None, callback=None):
        return self.call(CREATE_COLLECTOR, params, callback)
