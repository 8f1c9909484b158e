"""create_app() — FastAPI application wiring the simulated routes."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from fastapi_traffic_simulator.config import Settings
from fastapi_traffic_simulator.handlers import RouteHandlers, error_response
from fastapi_traffic_simulator.middleware import with_logging
from fastapi_traffic_simulator.randomness import DefaultRandomSource
from fastapi_traffic_simulator.simulation import Simulation
from fastapi_traffic_simulator.sink import LoggingSink, RequestLogSink

# Unknown paths and known paths with the wrong method both answer 404.
_NOT_FOUND_STATUSES = frozenset({404, 405})


async def not_found_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    if exc.status_code in _NOT_FOUND_STATUSES:
        return error_response(404, "Not found")
    return await http_exception_handler(request, exc)


def create_app(
    *,
    settings: Settings | None = None,
    sim: Simulation | None = None,
    sink: RequestLogSink | None = None,
) -> FastAPI:
    settings = settings or Settings()
    sim = sim or Simulation(rng=DefaultRandomSource(settings.seed))
    sink = sink or LoggingSink()
    handlers = RouteHandlers(sim)

    app = FastAPI(
        title=settings.service_name,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    # (route id, path pattern, method, handler); any id after /items/ reads an item
    routes = [
        ("/health", "/health", "GET", handlers.health),
        ("/items/{item_id}", "/items/{item_id:path}", "GET", handlers.read_item),
        ("/items", "/items", "POST", handlers.create_item),
        ("/fanout", "/fanout", "GET", handlers.fan_out),
    ]
    for route_id, path, method, handler in routes:
        route = Route(
            path, with_logging(route_id, handler, sink=sink), methods=[method]
        )
        # Starlette adds HEAD alongside GET; only the listed method is served.
        route.methods = {method}
        app.router.routes.append(route)

    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.state.simulation = sim
    app.state.sink = sink
    return app
