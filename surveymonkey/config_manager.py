"""
SurveyMonkey Client Configuration

Supports:
- Immutable client options built from a mapping
- YAML config file with a separate secrets file for credentials
- Environment variable overrides for credentials
"""

import os
import yaml
from typing import Dict, List, Optional, Any, Mapping
from dataclasses import dataclass, fields

from .errors import ConfigurationError, ValidationError
from .surveymonkey_logger import logger


SUPPORTED_VERSIONS = ("v2", "v3")
DEFAULT_VERSION = "v2"

# camelCase spellings accepted for compatibility with other SurveyMonkey clients
OPTION_ALIASES = {
    "userAgent": "user_agent",
    "accessToken": "access_token",
    "maxWorkers": "max_workers",
}

ENV_API_KEY = "SURVEYMONKEY_API_KEY"
ENV_ACCESS_TOKEN = "SURVEYMONKEY_ACCESS_TOKEN"


@dataclass(frozen=True)
class ClientOptions:
    """Client options, fixed for the lifetime of a client"""
    version: str = DEFAULT_VERSION
    secure: bool = True
    user_agent: str = ""
    access_token: str = ""
    timeout: Optional[float] = None
    max_workers: int = 4

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "ClientOptions":
        """
        Build options from a plain mapping.

        Unknown keys are ignored with a warning. ``None`` values, and an
        empty ``version``, fall back to the defaults.
        """
        if options is None:
            return cls()
        if not isinstance(options, Mapping):
            raise ConfigurationError(
                "Options must be a mapping",
                field="options",
                value=type(options).__name__
            )

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                logger.warning(f"Ignoring unknown client option '{key}'")
                continue
            if value is None:
                continue
            # an empty version selects the default, it does not name one
            if name == "version" and not value:
                continue
            values[name] = value

        if "max_workers" in values:
            try:
                values["max_workers"] = int(values["max_workers"])
            except (TypeError, ValueError):
                raise ConfigurationError(
                    "max_workers must be an integer",
                    field="max_workers",
                    value=values["max_workers"]
                )
            if values["max_workers"] < 1:
                raise ConfigurationError(
                    "max_workers must be at least 1",
                    field="max_workers",
                    value=values["max_workers"]
                )

        if "secure" in values:
            values["secure"] = bool(values["secure"])

        return cls(**values)

    def to_dict(self) -> Dict:
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        if result["access_token"]:
            result["access_token"] = "***"
        return result


class ConfigManager:
    """
    Loads client settings from YAML.

    The main config file holds a ``surveymonkey`` section with the client
    options. Credentials (``api_key``, ``access_token``) live in a separate
    secrets file so they can stay out of version control.
    """

    SECTION = "surveymonkey"
    CREDENTIAL_KEYS = ("api_key", "access_token")

    def __init__(self, config_path: str, secrets_path: Optional[str] = None):
        self.config_path = config_path
        self.secrets_path = secrets_path or os.path.join(
            os.path.dirname(os.path.abspath(config_path)), "secrets.yaml"
        )
        self._config: Dict = {}
        self.load_config()

    def load_config(self) -> Dict:
        """Load the config file and merge credentials from the secrets file"""
        if not os.path.exists(self.config_path):
            raise ConfigurationError(
                f"Config file not found at {self.config_path}",
                field="config_path",
                value=self.config_path
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_path}: {e}",
                field="config_path",
                value=self.config_path
            ) from e

        self._config = dict(data.get(self.SECTION) or {})
        self._merge_secrets()
        self._apply_env_overrides()
        logger.debug(f"Loaded configuration from {self.config_path}")
        return self._config

    def _merge_secrets(self):
        """Merge credentials from the secrets file into the loaded section"""
        if not os.path.exists(self.secrets_path):
            logger.debug(f"No secrets file at {self.secrets_path}")
            return

        try:
            with open(self.secrets_path, 'r', encoding='utf-8') as f:
                secrets = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.secrets_path}: {e}",
                field="secrets_path",
                value=self.secrets_path
            ) from e

        section = secrets.get(self.SECTION) or {}
        for key in self.CREDENTIAL_KEYS:
            if section.get(key):
                self._config[key] = section[key]
        logger.debug(f"Merged credentials from {self.secrets_path}")

    def _apply_env_overrides(self):
        if os.environ.get(ENV_API_KEY):
            self._config["api_key"] = os.environ[ENV_API_KEY]
        if os.environ.get(ENV_ACCESS_TOKEN):
            self._config["access_token"] = os.environ[ENV_ACCESS_TOKEN]

    def get_raw_config(self) -> Dict:
        return dict(self._config)

    def get_version(self) -> str:
        return self._config.get("version") or DEFAULT_VERSION

    def get_log_level(self) -> str:
        return self._config.get("log_level", "INFO")

    def get_credential(self) -> str:
        """API key for v2, access token for v3"""
        if self.get_version() == "v3":
            return self._config.get("access_token", "")
        return self._config.get("api_key", "")

    def get_options(self) -> Dict:
        """Options mapping suitable for ``create_client``"""
        options = {
            key: value for key, value in self._config.items()
            if key not in ("api_key", "log_level")
        }
        # v3 carries the token as the credential itself
        if self.get_version() == "v3":
            options.pop("access_token", None)
        return options

    def validate_config(self, raise_on_error: bool = False) -> List[str]:
        """
        Validate the loaded configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        version = self.get_version()
        if version not in SUPPORTED_VERSIONS:
            errors.append(f"Unsupported version '{version}'")

        if not self.get_credential():
            needed = "access_token" if version == "v3" else "api_key"
            errors.append(f"Missing credential '{needed}'")

        timeout = self._config.get("timeout")
        if timeout is not None and not isinstance(timeout, (int, float)):
            errors.append(f"Invalid timeout '{timeout}'")

        max_workers = self._config.get("max_workers")
        if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
            errors.append(f"Invalid max_workers '{max_workers}'")

        if errors and raise_on_error:
            raise ValidationError("Configuration validation failed", errors)
        return errors
