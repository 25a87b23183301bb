"""
API Adapter Module

One adapter per SurveyMonkey API generation. Each adapter handles the
request/response conventions of its version.
"""

from .base import SurveyMonkeyAdapter, Operation
from .template_engine import URL_TEMPLATES, URLTemplate
from .v2 import SurveyMonkeyAPIv2
from .v3 import SurveyMonkeyAPIv3

__all__ = [
    'SurveyMonkeyAdapter',
    'Operation',
    'URL_TEMPLATES',
    'URLTemplate',
    'SurveyMonkeyAPIv2',
    'SurveyMonkeyAPIv3',
]
