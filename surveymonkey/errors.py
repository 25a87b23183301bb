"""
SurveyMonkey Error Classes

Provides structured error handling with detailed context for:
- Configuration errors (raised while building a client)
- Transport, HTTP status and JSON decode errors (delivered per call)
- Vendor-reported API errors
"""

from typing import Optional, Dict, List, Any


# Config fields whose values must never reach logs or error text
SECRET_FIELDS = frozenset({"credential", "api_key", "access_token", "accessToken"})


class SurveyMonkeyError(Exception):
    """
    Base exception for all SurveyMonkey client errors.

    ``details`` carries machine-readable context; empty entries are left
    out of ``to_dict`` so serialized errors only show what is known.
    """

    def __init__(self, message: str, details: Optional[Dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict:
        result = {"error": self.__class__.__name__, "message": self.message}
        details = {k: v for k, v in self.details.items() if v not in (None, "", [], {})}
        if details:
            result["details"] = details
        return result


class ConfigurationError(SurveyMonkeyError):
    """
    Invalid credential, option or config file.

    The offending value is kept in ``details`` for context, except for
    credential fields whose value is replaced with ``***``.
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, suggestion: Optional[str] = None):
        self.field = field
        self.suggestion = suggestion
        self.value = value if value is None else _describe_value(field, value)

        details = {}
        if field:
            details["field"] = field
        if self.value is not None:
            details["value"] = self.value
        if suggestion:
            details["suggestion"] = suggestion

        super().__init__(message, details)

    def __str__(self):
        text = self.message
        if self.field:
            text += f" (option '{self.field}'"
            if self.value is not None:
                text += f", got {self.value!r}"
            text += ")"
        if self.suggestion:
            text += f". Suggestion: {self.suggestion}"
        return text


class UnsupportedVersionError(ConfigurationError):
    """Requested API version is not built by the factory"""

    def __init__(self, version: Any, supported: List[str]):
        self.version = version
        self.supported = list(supported)
        super().__init__(
            f"Version {version} of the SurveyMonkey API is currently not supported.",
            field="version",
            value=version,
            suggestion=f"Use one of: {', '.join(self.supported)}"
        )


class ValidationError(SurveyMonkeyError):
    """One or more problems found in call parameters or configuration"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        super().__init__(message, {"errors": self.errors})

    def __str__(self):
        if not self.errors:
            return self.message
        if len(self.errors) == 1:
            return f"{self.message}: {self.errors[0]}"
        return f"{self.message} ({len(self.errors)} problems): " + "; ".join(self.errors)


class UnknownOperationError(SurveyMonkeyError, KeyError):
    """Operation key has no URL template"""

    def __init__(self, operation_key: str):
        self.operation_key = operation_key
        super().__init__(
            f"No URL template registered for operation '{operation_key}'",
            {"operation": operation_key}
        )

    def __str__(self):
        return self.message


class RequestError(SurveyMonkeyError):
    """
    Base class for errors raised while performing a single API call.

    Attributes:
        request_method: HTTP method used
        request_url: The URL that was called (api_key masked)
    """

    def __init__(self, message: str, request_method: str = "",
                 request_url: str = "", details: Optional[Dict] = None):
        self.request_method = request_method
        self.request_url = request_url
        super().__init__(message, details)


class TransportError(RequestError):
    """The API endpoint could not be reached"""

    def __init__(self, cause: Optional[BaseException] = None,
                 request_method: str = "", request_url: str = ""):
        self.cause = cause
        details = {"cause": f"{type(cause).__name__}: {cause}"} if cause else {}
        super().__init__(
            "Unable to connect to the SurveyMonkey API endpoint.",
            request_method, request_url, details
        )


class HttpStatusError(RequestError):
    """HTTP status code >= 400"""

    def __init__(self, status_code: int, body: str = "", response: Any = None,
                 request_method: str = "", request_url: str = ""):
        self.status_code = status_code
        self.body = body or ""
        self.response = response
        super().__init__(
            f"Got bad response statusCode from SurveyMonkey: {status_code}",
            request_method, request_url,
            {"status_code": status_code, "body": _truncate(self.body)}
        )

    def __str__(self):
        return f"HTTP {self.status_code}: {self.message}"


class DecodeError(RequestError):
    """Response body is not valid JSON"""

    def __init__(self, prev_error: Optional[BaseException] = None, body: str = "",
                 response: Any = None, request_method: str = "", request_url: str = ""):
        self.prev_error = prev_error
        self.body = body or ""
        self.response = response
        super().__init__(
            "Error parsing JSON answer from SurveyMonkey API.",
            request_method, request_url,
            {"parse_error": str(prev_error) if prev_error else "",
             "body": _truncate(self.body)}
        )


class ApiError(RequestError):
    """
    Logical failure reported by SurveyMonkey inside a successful HTTP response.

    Attributes:
        message: Vendor error message, unchanged
        code: Vendor status/code value, unchanged
        payload: The decoded response that carried the error
        version: API generation that produced the error (v2, v3)
    """

    def __init__(self, message: str, code: Any = None, payload: Any = None,
                 version: str = "", request_method: str = "", request_url: str = ""):
        self.code = code
        self.payload = payload
        self.version = version
        super().__init__(
            message, request_method, request_url,
            {"code": code, "version": version}
        )

    def __str__(self):
        if self.code is not None:
            return f"[{self.version or 'surveymonkey'}] {self.code}: {self.message}"
        return f"[{self.version or 'surveymonkey'}] {self.message}"

    def to_dict(self) -> Dict:
        return {
            "error": "ApiError",
            "message": self.message,
            "code": self.code,
            "version": self.version
        }


def create_api_error(message: str, code: Any = None, payload: Any = None,
                     version: str = "") -> ApiError:
    """
    Build an ApiError from a vendor error message and code.

    The vendor vocabulary is kept as is: neither message nor code is
    translated or coerced.
    """
    return ApiError(message=message, code=code, payload=payload, version=version)


def _truncate(text: str, limit: int = 500) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def _describe_value(field: Optional[str], value: Any) -> str:
    if field in SECRET_FIELDS:
        return "***"
    return _truncate(str(value), 100)
