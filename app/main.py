from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from datastore.history import build_default_history
from logging_config import configure_logging
from services.monitor import build_default_monitor
from services.summary import build_default_generator


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    monitor = build_default_monitor()
    try:
        yield
    finally:
        monitor.shutdown()
        build_default_monitor.cache_clear()
        build_default_generator.cache_clear()
        build_default_history.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Sensor Monitor",
        description="Bounded sensor-reading history with threshold classification and on-demand summaries.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
