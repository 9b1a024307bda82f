"""
Isolated template rendering with Jinja2
"""

from typing import Any, Dict, Optional

from jinja2 import Environment, StrictUndefined, select_autoescape


class Renderer:
    """
    Renders inline template source in isolation.

    Each render gets a fresh environment and only the variables passed in,
    so nothing from an ambient render context leaks into component HTML.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def _environment(self) -> Environment:
        options: Dict[str, Any] = {
            "autoescape": select_autoescape(default_for_string=True, default=True),
        }
        if self.strict:
            options["undefined"] = StrictUndefined
        return Environment(**options)

    def render_in_isolation(self, source: str, variables: Optional[Dict[str, Any]] = None) -> str:
        template = self._environment().from_string(source)
        return template.render(**(variables or {}))
