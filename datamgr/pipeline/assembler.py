"""
Record Assembler.

Resolves every field of a route and collects the results into a Record.
Resolution continues past failing fields so that a rejected submission
reports every problem at once.
"""

from __future__ import annotations

import logging
from datetime import datetime

from datamgr.errors import FieldError, RecordError
from datamgr.schemas.compiled import Route

from .resolver import FormValues, resolve_field
from .values import Record

logger = logging.getLogger(__name__)


def assemble_record(
    route: Route,
    form: FormValues,
    now: datetime | None = None,
) -> Record:
    """
    Build the record of one submission.

    Args:
        route: Compiled route the request was sent to
        form: Submitted form values
        now: Instant used for generated timestamps

    Returns:
        Record with one value per declared field

    Raises:
        RecordError: Carrying every FieldError, if any field failed
    """
    record = Record()
    errors: list[FieldError] = []

    for name, spec in route.fields.items():
        try:
            record.set(name, resolve_field(spec, form, now))
        except FieldError as e:
            errors.append(e)

    if errors:
        logger.warning(
            f"Rejected submission to {route.path}: "
            f"{len(errors)} invalid field(s) {sorted(e.field_name for e in errors)}"
        )
        raise RecordError(errors)

    return record
