"""Resource Routes — one catch-all route that hands every table request to the dispatcher.

Invariants:
    - Parameters = URL query string merged with the URL-encoded form body;
      the body wins when a field appears in both, and the first value of a
      repeated field is used
    - Dispatch runs as a task bound to the request: a client disconnect cancels it,
      aborting the in-flight query
    - 204 responses carry no body; every other response is the JSON envelope

Design Decisions:
    - The dispatcher is resolved from app.state through a dependency so tests can
      override it like any other FastAPI dependency
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from psql_mapper.services.dispatcher import DispatchResult, RequestDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(tags=["resources"])

T = TypeVar("T")

# HTTP 499 (nginx convention): client closed the request before a response
_CLIENT_CLOSED_REQUEST = 499
_DISCONNECT_POLL_SECONDS = 0.25


class ClientDisconnected(Exception):
    pass


def get_dispatcher(request: Request) -> RequestDispatcher:
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("Registry not initialized")
    return dispatcher


async def gather_params(request: Request) -> dict[str, str]:
    """Merge query string and URL-encoded form body into one flat dict."""
    params: dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, value)
    form = await request.form()
    body: dict[str, str] = {}
    for key, value in form.multi_items():
        if isinstance(value, str):
            body.setdefault(key, value)
    params.update(body)
    return params


async def run_bound_to_request(request: Request, awaitable: Awaitable[T]) -> T:
    """Await `awaitable`, cancelling it if the client disconnects first."""
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=_DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                logger.info(
                    "Client disconnected; request cancelled",
                    extra={"method": request.method, "path": request.url.path},
                )
                raise ClientDisconnected()
    except asyncio.CancelledError:
        task.cancel()
        raise


def render(result: DispatchResult) -> Response:
    if result.body is None:
        return Response(status_code=result.status, headers=result.headers)
    return JSONResponse(
        content=result.body, status_code=result.status, headers=result.headers,
    )


@router.api_route(
    "/{resource_path:path}",
    methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    include_in_schema=False,
)
async def dispatch_resource(
    request: Request,
    resource_path: str,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
) -> Response:
    params = await gather_params(request)
    try:
        result = await run_bound_to_request(
            request,
            dispatcher.dispatch(request.method, request.url.path, params),
        )
    except ClientDisconnected:
        return Response(status_code=_CLIENT_CLOSED_REQUEST)
    return render(result)
