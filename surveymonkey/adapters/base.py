"""
Base API Adapter

Defines the request pipeline shared by every SurveyMonkey API generation.
"""

import requests
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from ..config_manager import ClientOptions
from ..errors import (
    ApiError, DecodeError, HttpStatusError, TransportError
)
from ..surveymonkey_logger import (
    logger, log_request, log_response, log_error, mask_url, RequestTimer
)
from ..url_config import URLConfig

Callback = Callable[[Optional[BaseException], Any], None]


@dataclass(frozen=True)
class Operation:
    """
    Static description of one API method.

    Attributes:
        name: Vendor method name (v2) or URL template key (v3)
        resource: Vendor resource the method belongs to
        allowed_params: Caller keys forwarded upstream (v2 whitelist)
        http_method: HTTP verb
        id_fields: Caller keys that fill the URL path (v3)
    """
    name: str
    resource: str
    allowed_params: FrozenSet[str] = frozenset()
    http_method: str = "GET"
    id_fields: Tuple[str, ...] = ()


def normalize_call_args(params: Any = None, callback: Optional[Callback] = None):
    """Accept ``(callback)`` as shorthand for ``({}, callback)``"""
    if callable(params) and callback is None:
        return {}, params
    if params is None:
        return {}, callback
    if not isinstance(params, dict):
        params = dict(params)
    return params, callback


class SurveyMonkeyAdapter(ABC):
    """
    Abstract base class for versioned SurveyMonkey clients.

    Each subclass implements:
    - Building the HTTP request for an operation
    - Recognizing the vendor error field of its API generation
    """

    version = ""

    def __init__(self, options: Optional[ClientOptions] = None):
        self.options = options or ClientOptions(version=self.version)
        self.url_config = URLConfig(self.options.secure, self.options.user_agent)
        self.timeout = self.options.timeout
        self._executor = ThreadPoolExecutor(
            max_workers=self.options.max_workers,
            thread_name_prefix=f"surveymonkey-{self.version}"
        )

    @property
    def base_url(self) -> str:
        return self.url_config.get_service_url(self.version)

    @property
    @abstractmethod
    def bearer_token(self) -> str:
        pass

    @abstractmethod
    def build_request(self, operation: Operation, params: Dict) -> Dict:
        """
        Build the HTTP request for an operation.

        Returns:
            Dict with keys: url, method, headers and optionally json/params
        """
        pass

    @abstractmethod
    def extract_api_error(self, data: Any) -> Optional[ApiError]:
        """Return an ApiError if the decoded payload reports a failure"""
        pass

    def get_headers(self, content_type: str = "application/json") -> Dict:
        """Build standard headers"""
        headers = {
            "Authorization": f"bearer {self.bearer_token}",
            "User-Agent": self.url_config.get_user_agent(),
        }
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    # ==========================================
    # Request pipeline
    # ==========================================

    def call(self, operation: Operation, params: Any = None,
             callback: Optional[Callback] = None) -> Future:
        """
        Build the request synchronously, then send it on the worker pool.

        Errors that prevent a request from being built (unknown operation,
        missing path id) raise here, before any network activity.
        """
        params, callback = normalize_call_args(params, callback)
        request_info = self.build_request(operation, params)
        return self._executor.submit(self._run, request_info, callback)

    def _run(self, request_info: Dict, callback: Optional[Callback]) -> Any:
        try:
            result = self.send(request_info)
        except Exception as e:
            self._notify(callback, e, None)
            raise
        self._notify(callback, None, result)
        return result

    @staticmethod
    def _notify(callback: Optional[Callback], error: Optional[BaseException], result: Any):
        if callback is None:
            return
        try:
            callback(error, result)
        except Exception as e:
            log_error("Callback raised", e)

    def send(self, request_info: Dict) -> Any:
        """Perform one HTTP request and return the decoded payload"""
        method = request_info.get("method", "GET").upper()
        url = request_info["url"]
        safe_url = mask_url(url)

        log_request(
            method=method,
            url=url,
            headers=request_info.get("headers"),
            payload=request_info.get("json"),
            query=request_info.get("params")
        )

        request_kwargs = {
            "headers": request_info["headers"],
            "timeout": self.timeout,
        }
        if "json" in request_info:
            request_kwargs["json"] = request_info["json"]
        if "params" in request_info:
            request_kwargs["params"] = request_info["params"]

        try:
            with RequestTimer(method, url) as timer:
                response = requests.request(method, url, **request_kwargs)
        except requests.RequestException as e:
            log_error(f"Request to {safe_url} failed", e)
            raise TransportError(e, request_method=method, request_url=safe_url) from e

        is_success = response.status_code < 400
        log_response(
            status_code=response.status_code,
            elapsed=timer.elapsed,
            response_text=response.text,
            success=is_success
        )

        return self.parse_response(response, method, safe_url)

    def parse_response(self, response: requests.Response, method: str = "",
                       url: str = "") -> Any:
        """
        Turn an HTTP response into the decoded payload.

        Checked in order: HTTP status, JSON decoding, vendor error field.
        """
        body = response.text

        if response.status_code >= 400:
            raise HttpStatusError(
                response.status_code, body=body, response=response,
                request_method=method, request_url=url
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                e, body=body, response=response,
                request_method=method, request_url=url
            ) from e

        api_error = self.extract_api_error(data)
        if api_error is not None:
            api_error.request_method = method
            api_error.request_url = url
            logger.info(f"⬅️ ❌ {api_error}")
            raise api_error

        return data

    # ==========================================
    # Lifecycle
    # ==========================================

    def close(self, wait: bool = True):
        """Stop accepting calls and release the worker pool"""
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.base_url}>"


__all__ = [
    "Callback",
    "Operation",
    "SurveyMonkeyAdapter",
    "normalize_call_args",
]
