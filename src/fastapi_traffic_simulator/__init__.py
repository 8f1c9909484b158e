"""FastAPI Traffic Simulator - synthetic latency and failure outcomes over HTTP."""

from fastapi_traffic_simulator.app import create_app
from fastapi_traffic_simulator.config import Settings
from fastapi_traffic_simulator.context import (
    LifecycleState,
    RequestContext,
    RequestRecord,
)
from fastapi_traffic_simulator.downstream import (
    DownstreamCallResult,
    fan_out,
    simulate_downstream_call,
)
from fastapi_traffic_simulator.exceptions import (
    ConfigurationError,
    ContextStateError,
    SimulatorError,
)
from fastapi_traffic_simulator.handlers import RouteHandlers
from fastapi_traffic_simulator.log_config import JsonFormatter, configure_logging
from fastapi_traffic_simulator.middleware import with_logging
from fastapi_traffic_simulator.outcomes import ErrorType, LatencyBucket
from fastapi_traffic_simulator.randomness import DefaultRandomSource, RandomSource
from fastapi_traffic_simulator.simulation import Simulation
from fastapi_traffic_simulator.sink import InMemorySink, LoggingSink, RequestLogSink

__all__ = [
    "ConfigurationError",
    "ContextStateError",
    "DefaultRandomSource",
    "DownstreamCallResult",
    "ErrorType",
    "InMemorySink",
    "JsonFormatter",
    "LatencyBucket",
    "LifecycleState",
    "LoggingSink",
    "RandomSource",
    "RequestContext",
    "RequestLogSink",
    "RequestRecord",
    "RouteHandlers",
    "Settings",
    "Simulation",
    "SimulatorError",
    "configure_logging",
    "create_app",
    "fan_out",
    "simulate_downstream_call",
    "with_logging",
]
