"""Shared pytest fixtures for fastapi-traffic-simulator tests."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest
from starlette.requests import Request

from fastapi_traffic_simulator.simulation import Simulation
from fastapi_traffic_simulator.sink import InMemorySink


class ScriptedRandom:
    """RandomSource replaying fixed draws, for exact outcome control."""

    def __init__(
        self, randoms: Iterable[float] = (), ints: Iterable[int] = ()
    ) -> None:
        self._randoms = list(randoms)
        self._ints = list(ints)

    def random(self) -> float:
        assert self._randoms, "no scripted random() draws left"
        return self._randoms.pop(0)

    def randint(self, low: int, high: int) -> int:
        assert self._ints, "no scripted randint() draws left"
        value = self._ints.pop(0)
        assert low <= value <= high, f"scripted {value} outside [{low}, {high}]"
        return value

    @property
    def exhausted(self) -> bool:
        return not self._randoms and not self._ints


class RecordingSleep:
    """Instant sleep that remembers every requested delay."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    async def __call__(self, milliseconds: int) -> None:
        self.calls.append(milliseconds)


class SequentialIds:
    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._count = 0

    def __call__(self) -> str:
        self._count += 1
        return f"{self._prefix}-{self._count}"


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def sink() -> InMemorySink:
    return InMemorySink()


@pytest.fixture
def make_sim(recording_sleep: RecordingSleep) -> Any:
    """Factory for a Simulation driven by scripted draws and instant sleep."""

    def _make(randoms: Iterable[float] = (), ints: Iterable[int] = ()) -> Simulation:
        return Simulation(
            rng=ScriptedRandom(randoms, ints),
            sleep=recording_sleep,
            new_id=SequentialIds(),
        )

    return _make


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects with an optional body."""

    def _make(
        method: str = "GET",
        path: str = "/",
        body: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }
        sent = False

        async def receive() -> dict[str, Any]:
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_rng() -> Any:
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom
