"""
Route Dispatcher for datamgr.

Maps an incoming request to its compiled route and turns the ingest
pipeline's outcome into an HTTP response:

    unknown path         -> 404
    unparseable form     -> 400 "Error parsing form: ..."
    invalid fields       -> 400 with every field error
    schema defect        -> 500 "misconfiguration"
    filesystem/encoding  -> 500 generic message
    success              -> 303 to the callback, else the referrer
"""
from __future__ import annotations

import logging

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.responses import PlainTextResponse, RedirectResponse, Response

from datamgr.config.schemas import DEFAULT_MAX_FORM_MEMORY
from datamgr.errors import DatamgrError
from datamgr.pipeline import FormValues, IngestContext, IngestPipeline
from datamgr.schemas import Route, Schema

logger = logging.getLogger(__name__)

CALLBACK_KEY = "callback"


class FormParseError(Exception):
    """The request body could not be parsed as a form."""


async def read_form(request: Request, max_part_size: int = DEFAULT_MAX_FORM_MEMORY) -> FormValues:
    """
    Read all submitted values of a request.

    Urlencoded and multipart bodies are detected from the content type.
    Body values come first, URL query values after them. Uploaded files
    are ignored.

    Raises:
        FormParseError: If the body is not a valid form
    """
    values: dict[str, list[str]] = {}
    try:
        async with request.form(max_part_size=max_part_size) as form:
            for key, value in form.multi_items():
                if isinstance(value, str):
                    values.setdefault(key, []).append(value)
    except (HTTPException, MultiPartException) as e:
        detail = getattr(e, "detail", None) or getattr(e, "message", None) or str(e)
        raise FormParseError(detail) from e

    for key, value in request.query_params.multi_items():
        values.setdefault(key, []).append(value)
    return values


def redirect_target(path: str, form: FormValues, referer: str | None) -> str:
    """
    Where to send the client after a successful submission.

    The first ``callback`` value if set, else the Referer header, else the
    directory of the request path.
    """
    callbacks = form.get(CALLBACK_KEY) or []
    if callbacks and callbacks[0]:
        return callbacks[0]
    if referer:
        return referer
    return path.rpartition("/")[0] + "/"


class RouteDispatcher:
    """
    Dispatches requests to compiled routes.

    Holds only read-only state (the compiled schema and a stateless
    pipeline) and is shared by all concurrent requests.
    """

    def __init__(
        self,
        schema: Schema,
        pipeline: IngestPipeline | None = None,
        *,
        max_form_memory: int = DEFAULT_MAX_FORM_MEMORY,
    ):
        self.schema = schema
        self.pipeline = pipeline or IngestPipeline()
        self.max_form_memory = max_form_memory

    def lookup(self, path: str) -> Route | None:
        """Find the route for an exact request path."""
        return self.schema.get(path)

    def not_found(self, method: str, path: str) -> Response:
        logger.warning(f"{method} {path}: 404 Not Found")
        return PlainTextResponse("404 page not found", status_code=404)

    async def handle(self, request: Request) -> Response:
        """Serve one HTTP request."""
        method = request.method
        path = request.url.path

        route = self.lookup(path)
        if route is None:
            return self.not_found(method, path)

        logger.info(f"{method} {path}")

        try:
            form = await read_form(request, self.max_form_memory)
        except FormParseError as e:
            logger.warning(f"{method} {path}: error parsing form: {e}")
            return PlainTextResponse(f"Error parsing form: {e}", status_code=400)

        return await self.dispatch(method, route, form, request.headers.get("referer"))

    async def dispatch(
        self,
        method: str,
        route: Route,
        form: FormValues,
        referer: str | None = None,
    ) -> Response:
        """
        Run a parsed submission through the pipeline.

        File I/O runs in a worker thread so it never blocks other requests.
        """
        ctx = IngestContext(method=method, route_path=route.path)

        try:
            result = await run_in_threadpool(self.pipeline.execute, route, form, ctx)
        except DatamgrError as e:
            if e.status_code >= 500:
                logger.error(f"[{ctx.short_id}] {method} {route.path}: {e}")
            else:
                logger.warning(f"[{ctx.short_id}] {method} {route.path}: {e.status_code}")
            return PlainTextResponse(e.public_message, status_code=e.status_code)

        logger.debug(f"[{ctx.short_id}] {result.to_dict()}")
        return RedirectResponse(
            redirect_target(route.path, form, referer),
            status_code=303,
        )
