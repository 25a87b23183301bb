"""
Tests for the version selecting client factory
"""

import pytest
from unittest.mock import patch

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import surveymonkey
from surveymonkey import (
    create_client, create_client_from_config,
    SurveyMonkeyAPIv2, SurveyMonkeyAPIv3,
    ConfigurationError, UnsupportedVersionError
)


@pytest.fixture
def clients():
    created = []
    yield created
    for client in created:
        client.close()


class TestCreateClient:

    def test_defaults_to_v2(self, clients):
        client = create_client("api-key")
        clients.append(client)
        assert isinstance(client, SurveyMonkeyAPIv2)
        assert client.api_key == "api-key"
        assert client.options.secure is True

    def test_explicit_v2_with_token(self, clients):
        client = create_client("api-key", {"version": "v2", "accessToken": "tok"})
        clients.append(client)
        assert isinstance(client, SurveyMonkeyAPIv2)
        assert client.get_headers()["Authorization"] == "bearer tok"

    @pytest.mark.parametrize("options", [{"version": ""}, {"version": None}, {}])
    def test_blank_version_uses_default(self, clients, options):
        client = create_client("api-key", options)
        clients.append(client)
        assert isinstance(client, SurveyMonkeyAPIv2)
        assert client.options.version == "v2"

    def test_v3(self, clients):
        client = create_client("oauth-token", {"version": "v3"})
        clients.append(client)
        assert isinstance(client, SurveyMonkeyAPIv3)
        assert client.access_token == "oauth-token"

    @pytest.mark.parametrize("credential", [None, ""])
    @patch('requests.request')
    def test_missing_credential(self, mock_request, credential):
        with pytest.raises(ConfigurationError):
            create_client(credential)
        mock_request.assert_not_called()

    @patch('requests.request')
    def test_unsupported_version(self, mock_request):
        with pytest.raises(UnsupportedVersionError) as exc_info:
            create_client("api-key", {"version": "v1.3"})
        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.version == "v1.3"
        mock_request.assert_not_called()

    def test_options_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            create_client("api-key", ["v2"])

    def test_insecure_endpoint(self, clients):
        client = create_client("api-key", {"secure": False})
        clients.append(client)
        assert client.base_url == "http://api.surveymonkey.net/v2"

    def test_user_agent(self, clients):
        client = create_client("api-key", {"userAgent": "my-app/1.0"})
        clients.append(client)
        user_agent = client.get_headers()["User-Agent"]
        assert user_agent == f"my-app/1.0 surveymonkey-python/{surveymonkey.__version__}"

    def test_default_user_agent(self, clients):
        client = create_client("api-key")
        clients.append(client)
        assert client.get_headers()["User-Agent"] == f"surveymonkey-python/{surveymonkey.__version__}"

    def test_options_are_immutable(self, clients):
        client = create_client("api-key", {"secure": True})
        clients.append(client)
        with pytest.raises(AttributeError):
            client.options.secure = False

    def test_context_manager(self):
        with create_client("api-key") as client:
            assert isinstance(client, SurveyMonkeyAPIv2)


class TestCreateClientFromConfig:

    def test_builds_v3_client(self, tmp_path, monkeypatch, clients):
        monkeypatch.delenv("SURVEYMONKEY_API_KEY", raising=False)
        monkeypatch.delenv("SURVEYMONKEY_ACCESS_TOKEN", raising=False)
        config_path = tmp_path / "config.yaml"
        config_path.write_text("surveymonkey:\n  version: v3\n  user_agent: tests\n")
        (tmp_path / "secrets.yaml").write_text("surveymonkey:\n  access_token: file-token\n")

        client = create_client_from_config(str(config_path))
        clients.append(client)

        assert isinstance(client, SurveyMonkeyAPIv3)
        assert client.access_token == "file-token"
        assert client.options.user_agent == "tests"

    def test_missing_credential(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SURVEYMONKEY_API_KEY", raising=False)
        monkeypatch.delenv("SURVEYMONKEY_ACCESS_TOKEN", raising=False)
        config_path = tmp_path / "config.yaml"
        config_path.write_text("surveymonkey:\n  version: v2\n")

        with pytest.raises(ConfigurationError):
            create_client_from_config(str(config_path))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
