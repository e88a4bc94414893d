"""
Schema Document Models.

Pydantic models describing the raw shape of ``datamgr.yaml``. These only
check structure (which keys hold mappings, which hold booleans); resolving
field types, generation strategies and templates is the compiler's job.

Validation is staged: the document, then each route, then each field and
file declaration. A structural defect in one field therefore never hides
defects in its siblings.

Example document:
    receive:
      /signup:
        fields:
          name:
            required: true
          newsletter:
            type: bool
          joined_at:
            generate: timestamp
            internal: true
        create_file:
          name: 'out/{{ field("name") }}.yaml'
          format: yaml
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


def _none_to_empty(value: Any, empty: Any) -> Any:
    return empty if value is None else value


class FieldDocument(BaseModel):
    """
    Declaration of a single form field.

    Attributes:
        internal: Never read from request input
        value: Constant value used when nothing else supplies one
        type: "string" (default) or "bool"
        generate: "" or "timestamp"
        required: Reject submissions that omit the field
        format: strftime layout for generated timestamps
    """

    internal: bool = Field(default=False, description="Never read from request input")
    value: Any = Field(default=None, description="Constant value")
    type: str = Field(default="", description="Field type")
    generate: str = Field(default="", description="Generation strategy")
    required: bool = Field(default=False, description="Field must be submitted")
    format: str = Field(default="", description="Generation format")

    @field_validator("type", "generate", "format", mode="before")
    @classmethod
    def _empty_string(cls, value: Any) -> Any:
        return _none_to_empty(value, "")


class CreateFileDocument(BaseModel):
    """Where and how a successful submission is written to disk."""

    name: str = Field(default="", description="Output path template")
    format: str = Field(default="", description="Output serialization format")

    @field_validator("name", "format", mode="before")
    @classmethod
    def _empty_string(cls, value: Any) -> Any:
        return _none_to_empty(value, "")


class ReceiveDocument(BaseModel):
    """
    A route receiving form submissions.

    Field and file declarations are kept raw here and validated one by one
    with FieldDocument and CreateFileDocument.
    """

    fields: dict[str, Any] = Field(default_factory=dict)
    create_file: Any = None

    @field_validator("fields", mode="before")
    @classmethod
    def _empty_fields(cls, value: Any) -> Any:
        value = _none_to_empty(value, {})
        # A bare "name:" entry declares a field with every default
        if isinstance(value, dict):
            return {name: _none_to_empty(spec, {}) for name, spec in value.items()}
        return value


class DatamgrDocument(BaseModel):
    """Top level of the schema document."""

    receive: dict[str, Any] = Field(default_factory=dict)

    @field_validator("receive", mode="before")
    @classmethod
    def _empty_receive(cls, value: Any) -> Any:
        return _none_to_empty(value, {})
