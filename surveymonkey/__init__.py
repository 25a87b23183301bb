"""
surveymonkey

A client for the SurveyMonkey REST API supporting the key based v2 API and
the OAuth based v3 API behind a single factory.
"""

__version__ = "0.3.0"

from typing import Any, Mapping, Optional, Union

from .adapters import SurveyMonkeyAPIv2, SurveyMonkeyAPIv3
from .config_manager import ClientOptions, ConfigManager, SUPPORTED_VERSIONS
from .errors import (
    SurveyMonkeyError, ConfigurationError, UnsupportedVersionError,
    ValidationError, UnknownOperationError, RequestError, TransportError,
    HttpStatusError, DecodeError, ApiError, create_api_error
)
from .surveymonkey_logger import configure_logging, logger

SurveyMonkeyClient = Union[SurveyMonkeyAPIv2, SurveyMonkeyAPIv3]

_CLIENT_CLASSES = {
    "v2": SurveyMonkeyAPIv2,
    "v3": SurveyMonkeyAPIv3,
}


def create_client(credential: str, options: Optional[Mapping[str, Any]] = None) -> SurveyMonkeyClient:
    """
    Return a SurveyMonkey API client of the requested version.

    Available options are:
     - version     The API version to use (v2 or v3). Defaults to v2.
     - secure      Whether to use the HTTPS endpoint. Defaults to True.
     - user_agent  Custom User-Agent description sent in the request header.
     - access_token  OAuth token sent as bearer header by the v2 client.
     - timeout     Transport timeout in seconds passed to requests.
     - max_workers Size of the client's worker pool.

    Args:
        credential: API key for v2, OAuth access token for v3
        options: Configuration options as described above

    Raises:
        ConfigurationError: no credential was given
        UnsupportedVersionError: options name a version this factory does not build
    """
    if not credential:
        raise ConfigurationError(
            "You have to provide an API key or access token for this to work.",
            field="credential",
            suggestion="Pass the v2 API key or the v3 OAuth access token"
        )

    client_options = ClientOptions.from_mapping(options)
    if client_options.version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(client_options.version, SUPPORTED_VERSIONS)

    client_class = _CLIENT_CLASSES[client_options.version]
    logger.debug(f"Creating SurveyMonkey {client_options.version} client")
    return client_class(credential, client_options)


def create_client_from_config(config_path: str, secrets_path: Optional[str] = None) -> SurveyMonkeyClient:
    """Build a client from a YAML config file and its secrets file"""
    manager = ConfigManager(config_path, secrets_path)
    configure_logging(level=manager.get_log_level())
    for problem in manager.validate_config():
        logger.warning(f"{config_path}: {problem}")
    return create_client(manager.get_credential(), manager.get_options())


__all__ = [
    "__version__",
    "create_client",
    "create_client_from_config",
    "configure_logging",
    "ClientOptions",
    "ConfigManager",
    "SurveyMonkeyAPIv2",
    "SurveyMonkeyAPIv3",
    "SurveyMonkeyError",
    "ConfigurationError",
    "UnsupportedVersionError",
    "ValidationError",
    "UnknownOperationError",
    "RequestError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
    "ApiError",
    "create_api_error",
]
