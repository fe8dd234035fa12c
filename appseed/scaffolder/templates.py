"""Jinja2 rendering for template files.

Template files in the tree carry a ``.tmpl`` suffix and ``{{ }}``
placeholders.  They are rendered with the project configuration as context,
so ``{{ app_name }}``, ``{{ import_path }}``, ``{{ bootstrap }}`` and every
other ``ProjectConfig`` field are available.  Undefined names are errors
rather than silently rendering as empty strings.
"""

from __future__ import annotations

import re
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError


class TemplateRenderError(Exception):
    """Raised when a template file fails to render."""

    def __init__(self, template_name: str, reason: str) -> None:
        self.template_name = template_name
        self.reason = reason
        super().__init__(f"failed to render {template_name}: {reason}")


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template-file content against a context dictionary.

    Sources are handed in as text (or bytes) by the caller, which reads them
    through whatever ``FileSystem`` it was given; the renderer itself never
    touches storage.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    def render_string(
        self, source: str, context: dict[str, Any], name: str = "<string>"
    ) -> str:
        """Render *source* with *context*.

        Args:
            source: Template text.
            context: Variables available inside the template.
            name: Label used in error messages, usually the template path.

        Raises:
            TemplateRenderError: On syntax errors or undefined variables.
        """
        try:
            template = self.env.from_string(source)
            return template.render(**context)
        except TemplateError as exc:
            raise TemplateRenderError(name, str(exc)) from exc

    def render_bytes(
        self, source: bytes, context: dict[str, Any], name: str = "<bytes>"
    ) -> bytes:
        """Render UTF-8 encoded *source* and return UTF-8 encoded output."""
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateRenderError(name, f"not valid UTF-8: {exc}") from exc
        return self.render_string(text, context, name).encode("utf-8")


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
