"""
tmplkit - dynamic value helpers for templates.

Introspection and comparison kernel (tmplkit.values) with a thin layer of
template helpers and a Jinja2 rendering host (tmplkit.template).
"""

import logging
import sys
from typing import Union

from .config import HelperSettings, SettingsLoader
from .template import TemplateEngine, TemplateFunctions

__version__ = "1.0.0"


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Send tmplkit logs to stderr at the given level."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


__all__ = [
    "HelperSettings",
    "SettingsLoader",
    "TemplateEngine",
    "TemplateFunctions",
    "configure_logging",
]
