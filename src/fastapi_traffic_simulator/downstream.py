"""Simulated downstream calls and concurrent fan-out."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from fastapi_traffic_simulator.outcomes import (
    ErrorType,
    downstream_latency,
    downstream_succeeds,
)
from fastapi_traffic_simulator.simulation import Simulation


@dataclass(frozen=True)
class DownstreamCallResult:
    """Outcome of one simulated remote call."""

    call_id: str
    latency_ms: int
    success: bool
    error_type: ErrorType | None = None

    def __post_init__(self) -> None:
        if self.latency_ms < 0:
            raise ValueError("latency_ms must be >= 0")
        if self.success and self.error_type is not None:
            raise ValueError("successful calls carry no error_type")
        if not self.success and self.error_type is not ErrorType.DOWNSTREAM_ERROR:
            raise ValueError("failed calls must carry ErrorType.DOWNSTREAM_ERROR")

    @classmethod
    def succeeded(cls, call_id: str, latency_ms: int) -> DownstreamCallResult:
        return cls(call_id=call_id, latency_ms=latency_ms, success=True)

    @classmethod
    def failed(cls, call_id: str, latency_ms: int) -> DownstreamCallResult:
        return cls(
            call_id=call_id,
            latency_ms=latency_ms,
            success=False,
            error_type=ErrorType.DOWNSTREAM_ERROR,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "call_id": self.call_id,
            "latency_ms": self.latency_ms,
            "success": self.success,
        }
        if self.error_type is not None:
            data["error_type"] = self.error_type.value
        return data


async def simulate_downstream_call(sim: Simulation) -> DownstreamCallResult:
    """Wait out a random call latency, then roll success."""
    latency = downstream_latency(sim.rng)
    await sim.sleep(latency)

    call_id = sim.new_id()
    if downstream_succeeds(sim.rng):
        return DownstreamCallResult.succeeded(call_id, latency)
    return DownstreamCallResult.failed(call_id, latency)


async def fan_out(sim: Simulation, width: int) -> list[DownstreamCallResult]:
    """Run ``width`` calls concurrently and return once all of them finished.

    Results are in dispatch order. Wall-clock cost is the slowest call.
    """
    if width < 1:
        raise ValueError("fan-out width must be >= 1")
    calls = [simulate_downstream_call(sim) for _ in range(width)]
    return list(await asyncio.gather(*calls))
