"""with_logging() — wraps a route handler with the request lifecycle."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import Response

from fastapi_traffic_simulator._types import Endpoint, Handler
from fastapi_traffic_simulator.context import RequestContext
from fastapi_traffic_simulator.sink import LoggingSink, RequestLogSink

logger = logging.getLogger(__name__)


def with_logging(
    route: str,
    handler: Handler,
    *,
    sink: RequestLogSink | None = None,
) -> Endpoint:
    """Return a Starlette endpoint that runs ``handler`` inside a RequestContext.

    Exactly one record reaches the sink per request. A handler exception is
    recorded as ``internal_error``/500 and then re-raised unchanged.
    """
    resolved_sink: RequestLogSink = sink or LoggingSink()

    async def endpoint(request: Request) -> Response:
        ctx = RequestContext(
            route=route,
            method=request.method,
            path=request.url.path,
        )
        ctx.start()

        try:
            response = await handler(request, ctx)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, route)
            ctx.fail()
            resolved_sink.emit(ctx.finalize())
            raise

        ctx.set_status(response.status_code)
        ctx.complete()
        resolved_sink.emit(ctx.finalize())
        return response

    endpoint.__name__ = getattr(handler, "__name__", "endpoint")
    endpoint._traffic_route = route  # type: ignore[attr-defined]
    return endpoint
