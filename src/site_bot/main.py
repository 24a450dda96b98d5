"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from site_bot.config import settings
from site_bot.container import build_container
from site_bot.database.engine import init_db
from site_bot.webhook.handler import router as webhook_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    logger.info("Starting %s …", settings.app_name)
    await init_db()
    logger.info("Database initialised")

    if getattr(app.state, "container", None) is None:
        app.state.container = build_container()
    queue = app.state.container.queue
    await queue.start_workers()
    yield
    logger.info("Shutting down %s …", settings.app_name)
    await queue.stop_workers()


app = FastAPI(
    title=settings.app_name,
    description="WhatsApp assistant for site employees and customers",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(webhook_router)


@app.get("/health")
async def health_check():
    """Simple liveness check."""
    return {"status": "healthy", "app": settings.app_name}
