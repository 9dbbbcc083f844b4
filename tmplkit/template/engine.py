"""
Template rendering host.

Wires the helper functions into a Jinja2 environment. Jinja2 does all the
parsing; this module only decides how values reach the helpers and how
results are printed:
    - helpers are installed as globals, subject-first helpers also as filters
    - missing lookups arrive in helpers as absent values (ChainableUndefined)
    - every {{ ... }} result is printed with the kernel's printable()
"""

import logging
from typing import Any, Optional

from jinja2 import ChainableUndefined, Environment, Template
from jinja2.sandbox import SandboxedEnvironment

from ..config import HelperSettings
from ..values import printable
from .functions import TemplateFunctions

logger = logging.getLogger(__name__)


class TemplateEngine:
    """
    Renders templates with the tmplkit helpers available.

    Example:
        engine = TemplateEngine()
        engine.render('{{ contains(data, "x") }}', "hellox")
        # Returns: "true"
    """

    def __init__(self, settings: Optional[HelperSettings] = None):
        self.settings = settings or HelperSettings()
        self.functions = TemplateFunctions(self.settings)
        logging.getLogger("tmplkit").setLevel(self.settings.log_level)

        self.env: Environment
        if self.settings.sandboxed:
            self.env = SandboxedEnvironment(
                undefined=ChainableUndefined,
                autoescape=False,
                finalize=printable,
            )
        else:
            self.env = Environment(
                undefined=ChainableUndefined,
                autoescape=False,
                finalize=printable,
            )

        self._register_extensions()

    def _register_extensions(self) -> None:
        """Register helper functions as globals and filters."""
        self.env.globals.update(self.functions.func_map())
        self.env.filters.update(self.functions.filter_map())

    def compile(self, source: str) -> Template:
        return self.env.from_string(source)

    def render(self, source: str, data: Any = None, **variables: Any) -> str:
        """
        Render a template string.

        Args:
            source: Jinja2 template source
            data: Root value, available as `data`
            **variables: Extra template variables

        Returns:
            Rendered text
        """
        logger.debug("Rendering template (%d chars)", len(source))
        return self.compile(source).render(data=data, **variables)
