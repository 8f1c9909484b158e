"""Simulation — the injected capabilities every handler draws from."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field

from fastapi_traffic_simulator._types import IdFactory, Sleeper
from fastapi_traffic_simulator.randomness import DefaultRandomSource, RandomSource


async def sleep_ms(milliseconds: int) -> None:
    await asyncio.sleep(milliseconds / 1000)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Simulation:
    """Random source, delay primitive and id factory shared by one app."""

    rng: RandomSource = field(default_factory=DefaultRandomSource)
    sleep: Sleeper = sleep_ms
    new_id: IdFactory = new_id
