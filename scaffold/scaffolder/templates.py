"""Jinja2 template rendering for scaffolded files.

Provides the TemplateRenderer class, the single place where the engine talks to
Jinja2.  Callers only rely on ``render(template_string, parameters) -> str``
raising :class:`~scaffold.errors.RenderError`, so the evaluator can change
without touching the materializer.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from jinja2 import Environment, StrictUndefined, TemplateError, Undefined

from scaffold.config import RenderConfig
from scaffold.errors import RenderError
from scaffold.resolver.parameters import ResolvedParameters
from scaffold.utils import (
    camel_case,
    kebab_case,
    pascal_case,
    shouty_snake_case,
    slugify,
    snake_case,
)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template strings against a sealed parameter set.

    The environment has no loader: file contents, destination paths and notes
    are all rendered from strings.  Output never depends on anything but the
    template text and the parameters.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=self.config.keep_trailing_newline,
            trim_blocks=self.config.trim_blocks,
            lstrip_blocks=self.config.lstrip_blocks,
            undefined=StrictUndefined if self.config.strict_undefined else Undefined,
        )
        # Register custom filters
        self.env.filters["kebab_case"] = kebab_case
        self.env.filters["snake_case"] = snake_case
        self.env.filters["shouty_snake_case"] = shouty_snake_case
        self.env.filters["pascal_case"] = pascal_case
        self.env.filters["camel_case"] = camel_case
        self.env.filters["slugify"] = slugify
        self.env.globals["env_var"] = _env_var
        # Jinja rewrites every line ending to newline_sequence; CRLF sources
        # go through this overlay so their endings survive.
        self._crlf_env = self.env.overlay(newline_sequence="\r\n")

    def render(
        self,
        template_string: str,
        parameters: ResolvedParameters,
        source: Optional[str | Path] = None,
    ) -> str:
        """Render *template_string* with *parameters* as the context.

        Args:
            template_string: Template text (file content, a path, notes...).
            parameters: The sealed parameter map.
            source: What is being rendered, used in error messages.

        Raises:
            RenderError: On a syntax error, an unknown filter or test, an
                undefined variable in strict mode, or an expression that fails
                while rendering (division by zero, index out of range...).
        """
        if not isinstance(parameters, ResolvedParameters):
            raise TypeError("render() needs sealed ResolvedParameters")
        if self.config.keep_trailing_newline and not _has_syntax(template_string):
            return template_string
        try:
            env = self._crlf_env if "\r\n" in template_string else self.env
            template = env.from_string(template_string)
            return template.render(parameters.as_context())
        except (
            TemplateError,
            ArithmeticError,
            AttributeError,
            LookupError,
            TypeError,
            ValueError,
        ) as exc:
            where = f" {source}" if source is not None else ""
            line = f" (line {exc.lineno})" if getattr(exc, "lineno", None) else ""
            raise RenderError(
                f"cannot render template{where}{line}: {exc}", path=source
            ) from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_SYNTAX_MARKERS = ("{{", "{%", "{#")


def _has_syntax(text: str) -> bool:
    """Plain text is returned untouched, mixed line endings included."""
    return any(marker in text for marker in _SYNTAX_MARKERS)


# ---------------------------------------------------------------------------
# Template globals
# ---------------------------------------------------------------------------

def _env_var(name: str, default: str = "") -> str:
    """``{{ env_var("USER") }}`` -- read an environment variable."""
    return os.environ.get(name, default)
