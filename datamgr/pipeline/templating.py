"""
Path Templating for datamgr.

Output file paths are Jinja2 templates rendered in a sandbox. Templates
are parsed once when the schema is compiled and rendered once per request.

The template sees a single callable, ``field``:
    field("name")   value of one field of the record
    field()         the whole record as a mapping

Example:
    out/{{ field("name") }}.yaml
    {{ field("team") }}/{{ field("joined_at") }}.yaml

The compiled template is never modified; the record is bound per call
through the render context, so concurrent requests share one template.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jinja2 import StrictUndefined, Template
from jinja2 import TemplateError as JinjaTemplateError
from jinja2.exceptions import UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from datamgr.errors import TemplateError

if TYPE_CHECKING:
    from datamgr.schemas.compiled import FileSpec

    from .values import Record

logger = logging.getLogger(__name__)

FIELD_ACCESSOR = "field"


def _finalize(value: Any) -> Any:
    # Booleans render the way they are written in YAML
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def create_environment() -> SandboxedEnvironment:
    """Create the sandboxed environment path templates are parsed in."""
    return SandboxedEnvironment(
        undefined=StrictUndefined,
        autoescape=False,
        finalize=_finalize,
    )


_environment = create_environment()


def compile_template(source: str) -> Template:
    """
    Parse a path template.

    Raises:
        jinja2.TemplateSyntaxError: If the template is not valid
    """
    return _environment.from_string(source)


class FieldAccessor:
    """The ``field`` callable bound to one record."""

    def __init__(self, values: dict[str, Any]):
        self._values = values

    def __call__(self, name: str | None = None) -> Any:
        if name is None:
            return dict(self._values)
        if name not in self._values:
            raise UndefinedError(f"field {name!r} is not defined")
        return self._values[name]


def render_path(file_spec: FileSpec, record: Record) -> str:
    """
    Render a file spec's path template against a record.

    Args:
        file_spec: Compiled file declaration
        record: Resolved record of the current request

    Returns:
        The rendered path

    Raises:
        TemplateError: If rendering fails or yields an empty path
    """
    accessor = FieldAccessor(record.to_dict())
    try:
        rendered = file_spec.template.render({FIELD_ACCESSOR: accessor})
    except (JinjaTemplateError, TypeError, ValueError) as e:
        raise TemplateError(
            f"Failed to build file name from template {file_spec.name!r}: {e}"
        ) from e

    if not rendered.strip():
        raise TemplateError(f"Template {file_spec.name!r} rendered an empty file name")

    logger.debug(f"Rendered file name {rendered!r} from template {file_spec.name!r}")
    return rendered
