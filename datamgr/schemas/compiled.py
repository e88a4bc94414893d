"""
Compiled Schema.

The internal, type-checked representation produced by the schema compiler.
Every string-valued option of the document has been resolved to an enum,
and every output path template has been parsed once.

A Schema is built at startup and never mutated afterwards, so it is shared
by all concurrent requests without locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping

if TYPE_CHECKING:
    from jinja2 import Template

    from datamgr.pipeline.values import FieldValue


# Layout applied at compile time when a timestamp field declares no format.
# Always six fractional digits (microseconds), never trimmed.
DEFAULT_TIMESTAMP_FORMAT = "%Y%m%d.%H%M%S.%f"

# Fallback used at request time if a timestamp field still has no format
RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class FieldType(str, Enum):
    """Value type a submitted field is coerced to."""

    STRING = "string"
    BOOL = "bool"


class GenerateStrategy(str, Enum):
    """Server-side generation of a field's value."""

    NONE = ""
    TIMESTAMP = "timestamp"


class FileFormat(str, Enum):
    """Serialization format of materialized records."""

    YAML = "yaml"


@dataclass(frozen=True)
class FieldSpec:
    """A compiled field declaration."""

    name: str
    type: FieldType = FieldType.STRING
    generate: GenerateStrategy = GenerateStrategy.NONE
    format: str = ""
    internal: bool = False
    required: bool = False
    value: FieldValue | None = None

    @property
    def form_key(self) -> str:
        """Form key the field is submitted under."""
        return f"field.{self.name}"

    @property
    def is_generated(self) -> bool:
        return self.generate is not GenerateStrategy.NONE


@dataclass(frozen=True)
class FileSpec:
    """
    A compiled file declaration.

    Attributes:
        name: Template source, kept for diagnostics
        template: Parsed template, rendered once per request
        format: Serialization format of the written record
    """

    name: str
    template: Template = field(compare=False, repr=False)
    format: FileFormat = FileFormat.YAML


@dataclass(frozen=True)
class Route:
    """A compiled receive route."""

    path: str
    fields: Mapping[str, FieldSpec] = field(default_factory=dict)
    file: FileSpec | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class Schema:
    """Read-only route table, keyed by exact request path."""

    routes: Mapping[str, Route] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))

    def get(self, path: str) -> Route | None:
        """Look up a route by exact path."""
        return self.routes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self.routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes.values())

    def __len__(self) -> int:
        return len(self.routes)

    @property
    def paths(self) -> list[str]:
        return list(self.routes)
