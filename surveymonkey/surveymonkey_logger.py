"""
SurveyMonkey Logging Utilities

Provides:
- Configurable logging for all client components
- Request/response debugging with credential masking
- Per-call timing
"""

import re
import time
import logging
from typing import Optional, Union

# ==========================================
# Logger Setup
# ==========================================

logger = logging.getLogger("surveymonkey")

LOG_FORMAT = "[%(name)s] %(levelname)s - %(message)s"
TIMESTAMP_LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s - %(message)s"

# Default handler (console)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def configure_logging(level: Union[str, int] = "INFO", include_timestamp: bool = False):
    """
    Configure the surveymonkey logger.

    Called by ``create_client_from_config`` with the ``log_level`` of the
    config file. Unknown level names fall back to INFO.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR) or numeric level
        include_timestamp: Whether to include timestamps in log messages
    """
    if isinstance(level, int):
        log_level = level
    else:
        log_level = logging.getLevelName(str(level).upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO
    logger.setLevel(log_level)

    formatter = logging.Formatter(
        TIMESTAMP_LOG_FORMAT if include_timestamp else LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    for handler in logger.handlers:
        handler.setFormatter(formatter)


# ==========================================
# Call Timer
# ==========================================

class RequestTimer:
    """Times one API call, labelled by HTTP method and masked URL"""

    def __init__(self, method: str, url: str):
        self.label = f"{method.upper()} {mask_url(url)}"
        self.start_time = None
        self.elapsed = 0.0
        self.failed = False

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start_time
        self.failed = exc_type is not None
        outcome = "failed after" if self.failed else "took"
        logger.debug(f"⏱️ {self.label} {outcome} {self.elapsed:.2f}s")
        return False


# ==========================================
# Request/Response Logging
# ==========================================

_API_KEY_PATTERN = re.compile(r"(api_key=)[^&\s]+")


def mask_url(url: str) -> str:
    """Hide the api_key query value in a URL"""
    return _API_KEY_PATTERN.sub(r"\1***", url or "")


def _mask_secret(value: str) -> str:
    return value[:12] + "..." if len(value) > 12 else value


def log_request(method: str, url: str, headers: dict = None,
                payload: dict = None, query: dict = None):
    """Log an outgoing API request"""
    logger.info(f"➡️ {method} {mask_url(url)}")

    if logger.isEnabledFor(logging.DEBUG):
        safe_headers = {}
        if headers:
            for k, v in headers.items():
                if "authorization" in k.lower():
                    safe_headers[k] = _mask_secret(v)
                else:
                    safe_headers[k] = v

        logger.debug(f"   Headers: {safe_headers}")

        if query:
            safe_query = {k: ("***" if k == "api_key" else v) for k, v in query.items()}
            logger.debug(f"   Query: {safe_query}")

        if payload:
            payload_str = str(payload)
            if len(payload_str) > 500:
                payload_str = payload_str[:500] + "..."
            logger.debug(f"   Payload: {payload_str}")


def log_response(status_code: int, elapsed: float,
                 response_text: Optional[str] = None, success: bool = True):
    """Log an API response"""
    status_icon = "✅" if success else "❌"
    logger.info(f"⬅️ {status_icon} HTTP {status_code} ({elapsed:.2f}s)")

    if logger.isEnabledFor(logging.DEBUG) and response_text:
        if len(response_text) > 500:
            response_text = response_text[:500] + "..."
        logger.debug(f"   Response: {response_text}")


def log_error(message: str, exception: Exception = None):
    """Log an error"""
    if exception:
        logger.error(f"❌ {message}: {type(exception).__name__} - {str(exception)}")
    else:
        logger.error(f"❌ {message}")
