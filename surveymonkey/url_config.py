"""
URL configuration for the SurveyMonkey client.

Resolves the API host for the secure/insecure setting and builds the
User-Agent header sent with every request.
"""

import logging

from . import __version__

logger = logging.getLogger("surveymonkey.url_config")

PACKAGE_USER_AGENT = f"surveymonkey-python/{__version__}"


class URLConfig:
    """URL configuration for one client instance.

    Responsibilities:
    - Pick the HTTPS or plain HTTP host
    - Build versioned base URLs
    - Build the User-Agent header value
    """

    ENDPOINTS = {
        "secure": "https://api.surveymonkey.net",
        "insecure": "http://api.surveymonkey.net",
    }

    def __init__(self, secure: bool = True, user_agent: str = ""):
        self.secure = secure
        self.user_agent = user_agent or ""
        if not secure:
            logger.warning("Using insecure HTTP endpoint, credentials are sent in clear text")

    def get_service_base_url(self) -> str:
        return self.ENDPOINTS["secure" if self.secure else "insecure"]

    def get_service_url(self, version: str) -> str:
        return f"{self.get_service_base_url()}/{version}"

    def get_user_agent(self) -> str:
        if self.user_agent:
            return f"{self.user_agent.strip()} {PACKAGE_USER_AGENT}"
        return PACKAGE_USER_AGENT
