"""
Field Resolver.

Produces exactly one typed value for one declared field of one request.

Resolution order:
    1. Generated fields (timestamp) take the current UTC time rendered
       with the field's format.
    2. Internal and generated fields stop here; request input is never read.
       A generated field is never rejected as missing, even if it is
       declared required.
    3. A field with no submitted value fails if required, else falls back
       to its configured value or the zero value of its type.
    4. Otherwise the LAST submitted value is coerced to the field's type.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Mapping, Sequence

from pydantic import TypeAdapter, ValidationError

from datamgr.errors import FieldError, FieldErrorKind
from datamgr.schemas.compiled import RFC3339_FORMAT, FieldSpec, FieldType, GenerateStrategy

from .values import FieldValue

logger = logging.getLogger(__name__)

# Multi-valued form data: key -> submitted values, in submission order
FormValues = Mapping[str, Sequence[str]]

_bool_adapter = TypeAdapter(bool)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_timestamp(fmt: str, now: datetime | None = None) -> str:
    """Render a timestamp in UTC, using RFC 3339 when no format is given."""
    if not fmt:
        fmt = RFC3339_FORMAT
    if now is None:
        now = _utc_now()
    return now.astimezone(timezone.utc).strftime(fmt)


def parse_bool(text: str) -> bool:
    """
    Parse a submitted boolean.

    Accepts true/false, 1/0, yes/no, on/off, t/f, y/n (any case).

    Raises:
        ValueError: If the text is not a boolean
    """
    try:
        return _bool_adapter.validate_python(text)
    except ValidationError as e:
        raise ValueError(f"invalid boolean {text!r}") from e


def _fallback(spec: FieldSpec) -> FieldValue:
    if spec.value is not None:
        return spec.value
    return FieldValue.zero(spec.type)


def resolve_field(
    spec: FieldSpec,
    form: FormValues,
    now: datetime | None = None,
) -> FieldValue:
    """
    Resolve one field against the submitted form.

    Args:
        spec: Compiled field declaration
        form: All submitted values of the request, keyed by form key
        now: Instant used for generated timestamps (defaults to now)

    Returns:
        The resolved value

    Raises:
        FieldError: MISSING_REQUIRED or TYPE_COERCION
    """
    if spec.generate is GenerateStrategy.TIMESTAMP:
        value = FieldValue.string(generate_timestamp(spec.format, now))
        logger.debug(f"Generate {spec.form_key}={value.value!r}")
        return value

    if spec.internal:
        return _fallback(spec)

    submitted = form.get(spec.form_key) or []
    if not submitted:
        if spec.required:
            raise FieldError(
                spec.name,
                FieldErrorKind.MISSING_REQUIRED,
                f"required field {spec.form_key} not set",
            )
        logger.debug(f"Empty {spec.form_key}")
        return _fallback(spec)

    raw = submitted[-1]
    if spec.type is FieldType.BOOL:
        try:
            value = FieldValue.boolean(parse_bool(raw))
        except ValueError as e:
            raise FieldError(
                spec.name,
                FieldErrorKind.TYPE_COERCION,
                f"cannot parse field {spec.form_key} to boolean (value is {list(submitted)!r})",
            ) from e
    else:
        value = FieldValue.string(raw)

    logger.debug(f"Parse {spec.form_key}={value.value!r}")
    return value
