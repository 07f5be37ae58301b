"""
Signal API - Application Factory.

============================================================
RESPONSIBILITY
============================================================
Builds the FastAPI app around a single SignalEngine.

- One engine per process; its caches live as long as the app
- Engine sessions closed on shutdown
- Tests inject their own engine

============================================================
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import SignalConfig
from core.exceptions import ConfigurationError
from signal_engine.engine import SignalEngine

from api.routers import health, signal


logger = logging.getLogger(__name__)


def create_app(
    engine: Optional[SignalEngine] = None,
    config: Optional[SignalConfig] = None,
) -> FastAPI:
    """
    Create the API application.

    Without an engine, one is built from `config` (or the environment).
    """
    if engine is None:
        config = config or SignalConfig.from_env()
        errors = config.validate()
        if errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")
        engine = SignalEngine.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Signal API started: {len(engine.feed_urls)} feeds, "
            f"offset={engine.config.timezone_offset_minutes}m"
        )
        yield
        await engine.close()
        logger.info("Signal API stopped")

    app = FastAPI(
        title="Crypto News Sentiment Signal API",
        description="Same-day crypto news sentiment aggregated into a long/short signal.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS (Allow local frontend development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.engine = engine
    app.state.started_at = time.monotonic()

    app.include_router(signal.router)
    app.include_router(health.router)

    return app
