"""Settings — process-level configuration read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from fastapi_traffic_simulator.exceptions import ConfigurationError

ENV_PREFIX = "TRAFFIC_SIM_"


def _env(environ: Mapping[str, str], name: str) -> str | None:
    # Empty values count as unset.
    value = environ.get(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_int(environ: Mapping[str, str], name: str) -> int | None:
    value = _env(environ, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be an integer, got {value!r}",
            variable=ENV_PREFIX + name,
        ) from None


@dataclass(frozen=True)
class Settings:
    """Bind address, logging and seeding. The outcome tables are not settings."""

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    seed: int | None = None
    service_name: str = "traffic-simulator"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = cls()
        port = _env_int(env, "PORT")
        if port is not None and not 0 < port < 65536:
            raise ConfigurationError(
                f"{ENV_PREFIX}PORT out of range: {port}", variable=ENV_PREFIX + "PORT"
            )
        return cls(
            host=_env(env, "HOST") or defaults.host,
            port=port if port is not None else defaults.port,
            log_level=(_env(env, "LOG_LEVEL") or defaults.log_level).upper(),
            seed=_env_int(env, "SEED"),
            service_name=_env(env, "SERVICE_NAME") or defaults.service_name,
        )
