"""Tests for RequestContext and RequestRecord."""

from __future__ import annotations

import logging

import pytest

from fastapi_traffic_simulator.context import (
    LifecycleState,
    RequestContext,
    RequestRecord,
)
from fastapi_traffic_simulator.downstream import DownstreamCallResult
from fastapi_traffic_simulator.exceptions import ContextStateError
from fastapi_traffic_simulator.outcomes import ErrorType


def _running(route: str = "/items") -> RequestContext:
    ctx = RequestContext(route=route, method="POST", path="/items")
    ctx.start()
    return ctx


class TestConstruction:
    def test_defaults(self) -> None:
        ctx = RequestContext(route="/health")
        assert ctx.state is LifecycleState.CREATED
        assert ctx.status is None
        assert ctx.error_type is None
        assert ctx.payload_size is None
        assert ctx.downstream_calls == []
        assert ctx.started_at.tzinfo is not None

    def test_request_ids_unique(self) -> None:
        assert RequestContext(route="/a").request_id != RequestContext(
            route="/a"
        ).request_id

    def test_downstream_calls_not_shared(self) -> None:
        a = RequestContext(route="/fanout")
        b = RequestContext(route="/fanout")
        a.add_downstream_call(DownstreamCallResult.succeeded("c1", 10))
        assert b.downstream_calls == []


class TestMutationRules:
    def test_status_set_once(self) -> None:
        ctx = _running()
        ctx.set_status(201)
        with pytest.raises(ContextStateError) as exc_info:
            ctx.set_status(500)
        assert exc_info.value.field == "status"
        assert ctx.status == 201

    def test_error_type_first_write_wins(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        ctx = _running()
        ctx.set_error_type(ErrorType.VALIDATION_ERROR)
        with caplog.at_level(logging.DEBUG, logger="fastapi_traffic_simulator"):
            ctx.set_error_type(ErrorType.DATABASE_ERROR)
        assert ctx.error_type is ErrorType.VALIDATION_ERROR
        assert "already classified" in caplog.text

    def test_payload_size_write_once(self) -> None:
        ctx = _running()
        ctx.set_payload_size(12)
        with pytest.raises(ContextStateError):
            ctx.set_payload_size(13)
        assert ctx.payload_size == 12

    def test_payload_size_rejects_negative(self) -> None:
        with pytest.raises(ValueError):
            _running().set_payload_size(-1)

    def test_downstream_calls_append_in_order(self) -> None:
        ctx = _running("/fanout")
        first = DownstreamCallResult.succeeded("c1", 10)
        second = DownstreamCallResult.failed("c2", 20)
        ctx.add_downstream_call(first)
        ctx.add_downstream_call(second)
        assert ctx.downstream_calls == [first, second]


class TestLifecycle:
    def test_start_twice_rejected(self) -> None:
        ctx = _running()
        with pytest.raises(ContextStateError):
            ctx.start()

    def test_complete_requires_status(self) -> None:
        ctx = _running()
        with pytest.raises(ContextStateError):
            ctx.complete()

    def test_complete_requires_running(self) -> None:
        ctx = RequestContext(route="/health")
        ctx.set_status(200)
        with pytest.raises(ContextStateError):
            ctx.complete()

    def test_complete_records_timing(self) -> None:
        ctx = _running()
        ctx.set_status(201)
        ctx.complete()
        assert ctx.state is LifecycleState.COMPLETED
        assert ctx.completed_at is not None
        assert ctx.completed_at >= ctx.started_at

    def test_fail_forces_internal_error(self) -> None:
        ctx = _running()
        ctx.set_error_type(ErrorType.VALIDATION_ERROR)
        ctx.fail()
        assert ctx.state is LifecycleState.FAILED
        assert ctx.status == 500
        assert ctx.error_type is ErrorType.INTERNAL_ERROR

    def test_fail_after_complete_rejected(self) -> None:
        ctx = _running()
        ctx.set_status(200)
        ctx.complete()
        with pytest.raises(ContextStateError):
            ctx.fail()

    def test_finalize_before_completion_rejected(self) -> None:
        with pytest.raises(ContextStateError):
            _running().finalize()

    def test_finalize_only_once(self) -> None:
        ctx = _running()
        ctx.set_status(200)
        ctx.complete()
        ctx.finalize()
        with pytest.raises(ContextStateError):
            ctx.finalize()

    def test_finalize_without_status_rejected(self) -> None:
        ctx = RequestContext(route="/health", state=LifecycleState.COMPLETED)
        with pytest.raises(ContextStateError):
            ctx.finalize()


class TestRequestRecord:
    def _record(self) -> RequestRecord:
        ctx = RequestContext(route="/fanout", method="GET", path="/fanout")
        ctx.start()
        ctx.add_downstream_call(DownstreamCallResult.succeeded("c1", 10))
        ctx.add_downstream_call(DownstreamCallResult.failed("c2", 30))
        ctx.set_error_type(ErrorType.PARTIAL_DOWNSTREAM_FAILURE)
        ctx.set_status(200)
        ctx.complete()
        return ctx.finalize()

    def test_snapshot_fields(self) -> None:
        record = self._record()
        assert record.route == "/fanout"
        assert record.status == 200
        assert record.error_type is ErrorType.PARTIAL_DOWNSTREAM_FAILURE
        assert len(record.downstream_calls) == 2
        assert isinstance(record.downstream_calls, tuple)
        assert record.duration_ms >= 0
        assert record.state is LifecycleState.COMPLETED

    def test_frozen(self) -> None:
        record = self._record()
        with pytest.raises(AttributeError):
            record.status = 500  # type: ignore[misc]

    def test_to_dict(self) -> None:
        data = self._record().to_dict()
        assert data["route"] == "/fanout"
        assert data["method"] == "GET"
        assert data["status"] == 200
        assert data["error_type"] == "partial_downstream_failure"
        assert [c["call_id"] for c in data["downstream_calls"]] == ["c1", "c2"]
        assert "payload_size" not in data

    def test_to_dict_omits_empty_optionals(self) -> None:
        ctx = RequestContext(route="/health", path="/health")
        ctx.start()
        ctx.set_status(200)
        ctx.complete()
        data = ctx.finalize().to_dict()
        assert "error_type" not in data
        assert "downstream_calls" not in data
