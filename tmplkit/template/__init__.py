"""Template helpers and rendering."""

from .engine import TemplateEngine
from .functions import TemplateFunctions
from .jsonpath import JSONPathEngine

__all__ = [
    "TemplateEngine",
    "TemplateFunctions",
    "JSONPathEngine",
]
