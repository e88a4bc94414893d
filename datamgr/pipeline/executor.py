"""
Ingest Pipeline for datamgr.

Runs the per-request stages for one route:

    assemble  -> resolve every field into a Record
    render    -> evaluate the route's path template (file routes only)
    write     -> encode the Record into the rendered path (file routes only)

Any stage failure raises a DatamgrError; nothing is written unless every
field resolved and the path rendered.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, TypeVar

from datamgr.schemas.compiled import Route

from .assembler import assemble_record
from .context import IngestContext, IngestResult
from .materializer import FileMaterializer
from .resolver import FormValues
from .templating import render_path

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IngestPipeline:
    """
    Executes submissions against compiled routes.

    The pipeline holds no per-request state and is shared by all requests.
    Execution is synchronous (file I/O); async callers run it in a worker
    thread.

    Example:
        pipeline = IngestPipeline(FileMaterializer(base_dir="data"))
        result = pipeline.execute(route, {"field.name": ["alice"]})
        result.path  # data/out/alice.yaml
    """

    def __init__(self, materializer: FileMaterializer | None = None):
        self.materializer = materializer or FileMaterializer()

    def execute(
        self,
        route: Route,
        form: FormValues,
        ctx: IngestContext | None = None,
        now: datetime | None = None,
    ) -> IngestResult:
        """
        Run one submission through the pipeline.

        Args:
            route: Route the request was sent to
            form: Submitted form values
            ctx: Request context (created if not provided)
            now: Instant used for generated timestamps

        Returns:
            IngestResult with the record and the written path

        Raises:
            RecordError: Submission rejected (400)
            TemplateError: Path template failed (500)
            FileSystemError, EncodingError: Write failed (500)
        """
        if ctx is None:
            ctx = IngestContext(route_path=route.path)

        record = self._timed(ctx, "assemble", lambda: assemble_record(route, form, now))
        result = IngestResult(context=ctx, record=record)

        if route.file is None:
            logger.debug(f"[{ctx.short_id}] No file declared for {route.path}")
            return result

        file_spec = route.file
        rendered = self._timed(ctx, "render", lambda: render_path(file_spec, record))
        result.path = self._timed(
            ctx,
            "write",
            lambda: self.materializer.materialize(rendered, record, file_spec.format),
        )

        logger.info(
            f"[{ctx.short_id}] Wrote {result.path} for {route.path} "
            f"in {result.duration_ms:.1f}ms"
        )
        return result

    @staticmethod
    def _timed(ctx: IngestContext, stage: str, fn: Callable[[], T]) -> T:
        start = time.perf_counter()
        try:
            return fn()
        finally:
            ctx.record_timing(stage, (time.perf_counter() - start) * 1000)
