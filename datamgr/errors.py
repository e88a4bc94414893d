"""
Error taxonomy for datamgr.

Every error carries the HTTP status it maps to and a message that is safe to
show to the submitting client. Operational details (paths, OS errors) stay in
the exception chain and the logs, never in ``public_message``.

Aggregated errors (SchemaError, RecordError) collect every problem found
instead of stopping at the first one.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


def format_errors(errors: Sequence[str]) -> str:
    """Format a list of error messages as a single aggregated message."""
    if len(errors) == 1:
        return f"1 error occurred:\n\t* {errors[0]}\n\n"
    points = "\n".join(f"\t* {e}" for e in errors)
    return f"{len(errors)} errors occurred:\n{points}\n\n"


class DatamgrError(Exception):
    """Base exception for all datamgr errors."""

    status_code: int = 500
    public_message: str = "Internal server error."


# =============================================================================
# Startup errors
# =============================================================================


class SchemaError(DatamgrError):
    """
    Raised when a schema document cannot be compiled.

    Holds one entry per structural defect. Fatal to startup.
    """

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__(format_errors(self.errors))


class SchemaLoadError(DatamgrError):
    """Raised when the schema file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Error reading {path}: {reason}")


# =============================================================================
# Request errors
# =============================================================================


class FieldErrorKind(str, Enum):
    """Why a single field failed to resolve."""

    MISSING_REQUIRED = "missing_required"
    TYPE_COERCION = "type_coercion"


class FieldError(DatamgrError):
    """A single field of a submission could not be resolved."""

    status_code = 400

    def __init__(self, field_name: str, kind: FieldErrorKind, message: str):
        self.field_name = field_name
        self.kind = kind
        super().__init__(message)

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return str(self)


class RecordError(DatamgrError):
    """Raised when one or more fields of a submission failed to resolve."""

    status_code = 400

    def __init__(self, field_errors: Sequence[FieldError]):
        self.field_errors = list(field_errors)
        super().__init__(format_errors([str(e) for e in self.field_errors]))

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return str(self)

    @property
    def field_names(self) -> set[str]:
        return {e.field_name for e in self.field_errors}


class TemplateError(DatamgrError):
    """The output path template failed to render. Indicates a schema defect."""

    public_message = "Could not process request due to misconfiguration."


class FileSystemError(DatamgrError):
    """The output directory or file could not be created."""

    public_message = "Could not process request due to a system error, please try again later."

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)


class EncodingError(DatamgrError):
    """The record could not be encoded into the output file."""

    public_message = "Could not process request because of data error."

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)
