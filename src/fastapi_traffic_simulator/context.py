"""RequestContext — per-request builder, and the RequestRecord it finalizes into."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from fastapi_traffic_simulator.downstream import DownstreamCallResult
from fastapi_traffic_simulator.exceptions import ContextStateError
from fastapi_traffic_simulator.outcomes import ErrorType

logger = logging.getLogger(__name__)

INTERNAL_ERROR_STATUS = 500


class LifecycleState(Enum):
    """Request lifecycle; ``completed`` and ``failed`` are terminal."""

    CREATED = "created"
    HANDLER_RUNNING = "handler_running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class RequestRecord:
    """Immutable snapshot of one finished request, handed to the log sink."""

    request_id: str
    route: str
    method: str
    path: str
    status: int
    error_type: ErrorType | None
    payload_size: int | None
    downstream_calls: tuple[DownstreamCallResult, ...]
    started_at: datetime
    completed_at: datetime
    duration_ms: float
    state: LifecycleState

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "request_id": self.request_id,
            "route": self.route,
            "method": self.method,
            "path": self.path,
            "status": self.status,
            "duration_ms": round(self.duration_ms, 3),
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
        }
        if self.error_type is not None:
            data["error_type"] = self.error_type.value
        if self.payload_size is not None:
            data["payload_size"] = self.payload_size
        if self.downstream_calls:
            data["downstream_calls"] = [c.to_dict() for c in self.downstream_calls]
        return data


@dataclass
class RequestContext:
    """Per-request state accumulated by a handler and its middleware.

    Status and payload size are write-once. The error type is
    first-write-wins; only ``fail()`` overrides it.
    """

    route: str
    method: str = "GET"
    path: str = ""
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    state: LifecycleState = LifecycleState.CREATED
    status: int | None = None
    error_type: ErrorType | None = None
    payload_size: int | None = None
    downstream_calls: list[DownstreamCallResult] = field(default_factory=list)
    completed_at: datetime | None = None
    _start: float = field(default_factory=time.perf_counter, repr=False)
    _duration_ms: float | None = field(default=None, repr=False)
    _finalized: bool = field(default=False, repr=False)

    def start(self) -> None:
        self._require(LifecycleState.CREATED, "start")
        self.state = LifecycleState.HANDLER_RUNNING

    def set_status(self, status: int) -> None:
        if self.status is not None:
            raise ContextStateError(
                f"status already set to {self.status}", field="status"
            )
        self.status = status

    def set_error_type(self, error_type: ErrorType) -> None:
        if self.error_type is not None:
            logger.debug(
                "Ignoring error type %s, already classified as %s",
                error_type.value,
                self.error_type.value,
            )
            return
        self.error_type = error_type

    def set_payload_size(self, size: int) -> None:
        if size < 0:
            raise ValueError("payload size must be >= 0")
        if self.payload_size is not None:
            raise ContextStateError("payload size already set", field="payload_size")
        self.payload_size = size

    def add_downstream_call(self, call: DownstreamCallResult) -> None:
        self.downstream_calls.append(call)

    def complete(self) -> None:
        self._require(LifecycleState.HANDLER_RUNNING, "complete")
        if self.status is None:
            raise ContextStateError("cannot complete without a status", field="status")
        self._stop(LifecycleState.COMPLETED)

    def fail(self) -> None:
        """Force the internal-error outcome after an unrecovered handler failure."""
        self._require(LifecycleState.HANDLER_RUNNING, "fail")
        # A status set before the failure is replaced, not kept.
        self.status = INTERNAL_ERROR_STATUS
        self.error_type = ErrorType.INTERNAL_ERROR
        self._stop(LifecycleState.FAILED)

    def finalize(self) -> RequestRecord:
        if self.state not in (LifecycleState.COMPLETED, LifecycleState.FAILED):
            raise ContextStateError(f"cannot finalize a {self.state.value} request")
        if self._finalized:
            raise ContextStateError("request already finalized")
        if (
            self.status is None
            or self.completed_at is None
            or self._duration_ms is None
        ):
            raise ContextStateError("request finished without status or timing")
        self._finalized = True
        return RequestRecord(
            request_id=self.request_id,
            route=self.route,
            method=self.method,
            path=self.path,
            status=self.status,
            error_type=self.error_type,
            payload_size=self.payload_size,
            downstream_calls=tuple(self.downstream_calls),
            started_at=self.started_at,
            completed_at=self.completed_at,
            duration_ms=self._duration_ms,
            state=self.state,
        )

    def _stop(self, state: LifecycleState) -> None:
        self._duration_ms = (time.perf_counter() - self._start) * 1000
        self.completed_at = datetime.now(timezone.utc)
        self.state = state

    def _require(self, expected: LifecycleState, action: str) -> None:
        if self.state is not expected:
            raise ContextStateError(
                f"cannot {action} a request in state {self.state.value}"
            )
