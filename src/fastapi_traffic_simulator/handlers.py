"""Route handlers — health, item read, item write and fan-out."""

from __future__ import annotations

import json

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from fastapi_traffic_simulator.context import RequestContext
from fastapi_traffic_simulator.downstream import fan_out
from fastapi_traffic_simulator.outcomes import (
    ErrorType,
    fan_out_width,
    health_latency,
    item_read_error,
    item_read_latency,
    write_base_latency,
    write_database_fails,
    write_db_latency,
    write_validation_fails,
)
from fastapi_traffic_simulator.simulation import Simulation

ITEM_READ_ERRORS: dict[ErrorType, tuple[int, str]] = {
    ErrorType.NOT_FOUND: (404, "Not found"),
    ErrorType.TIMEOUT: (504, "Request timeout"),
    ErrorType.DOWNSTREAM_ERROR: (502, "Downstream service error"),
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


class RouteHandlers:
    """The four simulated routes, bound to one Simulation."""

    def __init__(self, sim: Simulation | None = None) -> None:
        self.sim = sim or Simulation()

    async def health(self, request: Request, ctx: RequestContext) -> Response:
        await self.sim.sleep(health_latency(self.sim.rng))
        return PlainTextResponse("OK", status_code=200)

    async def read_item(self, request: Request, ctx: RequestContext) -> Response:
        latency = item_read_latency(self.sim.rng)
        await self.sim.sleep(latency)

        error_type = item_read_error(self.sim.rng)
        if error_type is not None:
            ctx.set_error_type(error_type)
            status_code, message = ITEM_READ_ERRORS[error_type]
            return error_response(status_code, message)

        return JSONResponse({"id": self.sim.new_id(), "latency_ms": latency})

    async def create_item(self, request: Request, ctx: RequestContext) -> Response:
        """Write path: base delay, parse, validation roll, DB delay, DB roll."""
        base_latency = write_base_latency(self.sim.rng)
        await self.sim.sleep(base_latency)

        body = await request.body()
        try:
            json.loads(body)
        except ValueError:
            ctx.set_error_type(ErrorType.VALIDATION_ERROR)
            return error_response(400, "Invalid JSON")
        ctx.set_payload_size(len(body))

        if write_validation_fails(self.sim.rng):
            ctx.set_error_type(ErrorType.VALIDATION_ERROR)
            return error_response(400, "Validation failed")

        db_latency = write_db_latency(self.sim.rng)
        await self.sim.sleep(db_latency)

        if write_database_fails(self.sim.rng):
            ctx.set_error_type(ErrorType.DATABASE_ERROR)
            return error_response(503, "Database error")

        return JSONResponse(
            {
                "id": self.sim.new_id(),
                "created": True,
                "total_latency_ms": base_latency + db_latency,
            },
            status_code=201,
        )

    async def fan_out(self, request: Request, ctx: RequestContext) -> Response:
        """Partial downstream failure is reported, never escalated."""
        width = fan_out_width(self.sim.rng)
        results = await fan_out(self.sim, width)

        for call in results:
            ctx.add_downstream_call(call)

        successful = sum(1 for call in results if call.success)
        failed = len(results) - successful
        if failed:
            ctx.set_error_type(ErrorType.PARTIAL_DOWNSTREAM_FAILURE)

        return JSONResponse(
            {
                "downstream_calls": width,
                "successful": successful,
                "failed": failed,
            }
        )
