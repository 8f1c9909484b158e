"""Outcome tables and the random generators that read them.

Every generator is a plain function over an injected ``RandomSource``. The
tables are module constants; nothing here holds state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fastapi_traffic_simulator.randomness import RandomSource


class ErrorType(Enum):
    """Error classifications attached to request records."""

    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    DOWNSTREAM_ERROR = "downstream_error"
    VALIDATION_ERROR = "validation_error"
    DATABASE_ERROR = "database_error"
    PARTIAL_DOWNSTREAM_FAILURE = "partial_downstream_failure"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class LatencyBucket:
    """Latency range selected when a draw falls below ``threshold``.

    Thresholds are cumulative across an ordered table, so each bucket's own
    probability is its threshold minus the previous one.
    """

    threshold: float
    low_ms: int
    high_ms: int
    name: str


ITEM_READ_BUCKETS: tuple[LatencyBucket, ...] = (
    LatencyBucket(threshold=0.80, low_ms=5, high_ms=20, name="fast"),
    LatencyBucket(threshold=0.95, low_ms=50, high_ms=150, name="medium"),
    LatencyBucket(threshold=1.0, low_ms=300, high_ms=800, name="slow"),
)
ITEM_READ_ERROR_PERCENT = 1.5
ITEM_READ_ERRORS: tuple[ErrorType, ...] = (
    ErrorType.NOT_FOUND,
    ErrorType.TIMEOUT,
    ErrorType.DOWNSTREAM_ERROR,
)

WRITE_BASE_LATENCY_MS = (20, 50)
WRITE_DB_LATENCY_MS = (30, 100)
WRITE_VALIDATION_FAILURE_PERCENT = 10.0
WRITE_DATABASE_FAILURE_PERCENT = 2.0

HEALTH_LATENCY_MS = (1, 5)

DOWNSTREAM_LATENCY_MS = (10, 200)
DOWNSTREAM_FAILURE_PERCENT = 20.0
FAN_OUT_WIDTH = (2, 5)


def roll_percent(rng: RandomSource) -> float:
    """Uniform draw in [0, 100)."""
    return rng.random() * 100


def sample_bucketed_latency(
    rng: RandomSource, buckets: tuple[LatencyBucket, ...]
) -> tuple[LatencyBucket, int]:
    """Pick a bucket with one draw against cumulative thresholds, then a latency."""
    draw = rng.random()
    chosen = buckets[-1]
    for bucket in buckets:
        if draw < bucket.threshold:
            chosen = bucket
            break
    return chosen, rng.randint(chosen.low_ms, chosen.high_ms)


def item_read_latency(rng: RandomSource) -> int:
    _, latency = sample_bucketed_latency(rng, ITEM_READ_BUCKETS)
    return latency


def item_read_error(rng: RandomSource) -> ErrorType | None:
    """Roll the item-read error, independent of the latency bucket."""
    if roll_percent(rng) < ITEM_READ_ERROR_PERCENT:
        return ITEM_READ_ERRORS[rng.randint(0, len(ITEM_READ_ERRORS) - 1)]
    return None


def write_base_latency(rng: RandomSource) -> int:
    return rng.randint(*WRITE_BASE_LATENCY_MS)


def write_db_latency(rng: RandomSource) -> int:
    return rng.randint(*WRITE_DB_LATENCY_MS)


def write_validation_fails(rng: RandomSource) -> bool:
    return roll_percent(rng) < WRITE_VALIDATION_FAILURE_PERCENT


def write_database_fails(rng: RandomSource) -> bool:
    return roll_percent(rng) < WRITE_DATABASE_FAILURE_PERCENT


def health_latency(rng: RandomSource) -> int:
    return rng.randint(*HEALTH_LATENCY_MS)


def downstream_latency(rng: RandomSource) -> int:
    return rng.randint(*DOWNSTREAM_LATENCY_MS)


def downstream_succeeds(rng: RandomSource) -> bool:
    return roll_percent(rng) > DOWNSTREAM_FAILURE_PERCENT


def fan_out_width(rng: RandomSource) -> int:
    return rng.randint(*FAN_OUT_WIDTH)
