"""FastAPI application factory for bragi-probe."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bragi_probe import __version__
from bragi_probe.api.routes import environments
from bragi_probe.config.loader import load_config
from bragi_probe.config.models import ProbeConfig
from bragi_probe.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: ProbeConfig | None = None) -> FastAPI:
    app = FastAPI(
        title="bragi-probe",
        version=__version__,
        description="Status of search-service environments and their index clusters",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    if config is None:
        try:
            config = load_config()
        except (FileNotFoundError, ValueError) as exc:
            logger.warning("No usable configuration, serving an empty registry: %s", exc)
            config = ProbeConfig()
        setup_logging(config.log_level)

    # Environment list is bound once; each query probes it afresh.
    app.state.config = config

    @app.get("/health", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(environments.router, prefix="/api")

    return app


app = create_app()
