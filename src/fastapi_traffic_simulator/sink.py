"""Log sinks — RequestLogSink, LoggingSink, InMemorySink."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from fastapi_traffic_simulator.context import RequestRecord


@runtime_checkable
class RequestLogSink(Protocol):
    """Receives exactly one finished record per request."""

    def emit(self, record: RequestRecord) -> None: ...


class LoggingSink:
    """Default sink writing each record as a structured log line."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("fastapi_traffic_simulator.requests")

    def emit(self, record: RequestRecord) -> None:
        level = logging.WARNING if record.status >= 500 else logging.INFO
        self._logger.log(
            level,
            "%s %s -> %d",
            record.method,
            record.path,
            record.status,
            extra={"request": record.to_dict()},
        )


class InMemorySink:
    """Collects records in a list. Single-process only."""

    def __init__(self) -> None:
        self.records: list[RequestRecord] = []

    def emit(self, record: RequestRecord) -> None:
        self.records.append(record)

    def clear(self) -> None:
        self.records.clear()
