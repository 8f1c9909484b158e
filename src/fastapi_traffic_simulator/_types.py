"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from starlette.requests import Request
from starlette.responses import Response

if TYPE_CHECKING:
    from fastapi_traffic_simulator.context import RequestContext

# Suspends the caller for the given number of milliseconds
Sleeper = Callable[[int], Awaitable[None]]
IdFactory = Callable[[], str]

Handler = Callable[[Request, "RequestContext"], Awaitable[Response]]
Endpoint = Callable[[Request], Awaitable[Response]]
