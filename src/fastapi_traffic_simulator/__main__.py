"""Run the simulator with uvicorn: ``python -m fastapi_traffic_simulator``."""

from __future__ import annotations

import logging

import uvicorn

from fastapi_traffic_simulator.app import create_app
from fastapi_traffic_simulator.config import Settings
from fastapi_traffic_simulator.log_config import configure_logging

logger = logging.getLogger("fastapi_traffic_simulator")


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level, service_name=settings.service_name)
    app = create_app(settings=settings)
    logger.info("Listening on %s:%d", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
