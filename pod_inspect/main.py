from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pod_inspect.api import health, report
from pod_inspect.core.dependencies import get_settings
from pod_inspect.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting pod-inspect-agent on port %s (max_events=%s, max_log_lines=%s)",
        settings.port,
        settings.max_events,
        settings.max_log_lines,
    )
    yield


app = FastAPI(title="pod-inspect-agent", version="1.0.0", lifespan=lifespan)
app.include_router(health.router)
app.include_router(report.router)
