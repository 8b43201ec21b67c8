"""SIF safety FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from sif_safety.api import auth, blocks, health, moderation, reports, sifs, ws
from sif_safety.core.config import settings

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(sifs.router)
app.include_router(reports.router)
app.include_router(blocks.router)
app.include_router(moderation.router)
app.include_router(ws.router)
