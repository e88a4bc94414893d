"""
Receive endpoint for datamgr.

A single catch-all handler. Every request path is matched exactly
against the routes of the compiled schema by the RouteDispatcher.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from datamgr.app.dependencies import get_dispatcher
from datamgr.app.dispatcher import RouteDispatcher

router = APIRouter(tags=["receive"])

RECEIVE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{path:path}", methods=RECEIVE_METHODS, include_in_schema=False)
async def receive(
    request: Request,
    dispatcher: RouteDispatcher = Depends(get_dispatcher),
) -> Response:
    """Receive a form submission for any configured route."""
    return await dispatcher.handle(request)
