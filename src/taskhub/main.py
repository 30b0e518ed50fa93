"""TaskHub main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskhub import __version__
from taskhub.api.realtime import realtime_router
from taskhub.api.router import router
from taskhub.config import settings
from taskhub.db.base import close_db, get_session, init_db
from taskhub.engine.seeding import DemoDataSeeder
from taskhub.middleware import (
    register_exception_handlers,
    security_headers_middleware,
    trace_id_middleware,
)
from taskhub.observability.trace import TraceIdFilter
from taskhub.realtime.gateway import BroadcastGateway

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - [%(trace_id)s] %(message)s",
)
for handler in logging.getLogger().handlers:
    handler.addFilter(TraceIdFilter())
logger = logging.getLogger("taskhub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting TaskHub server...")
    logger.info(f"Environment: {settings.env.value}")

    # Initialize database
    await init_db()
    logger.info("Database initialized")

    if settings.seed_demo_data:
        async with get_session() as session:
            await DemoDataSeeder(session).seed()

    logger.info(f"Real-time channel listening on {settings.realtime_path}")

    yield

    # Cleanup
    logger.info("Shutting down TaskHub server...")
    await app.state.gateway.close()
    await close_db()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="TaskHub",
    description="Task and note management with real-time change broadcasting",
    version=__version__,
    lifespan=lifespan,
)
app.state.gateway = BroadcastGateway()

register_exception_handlers(app)

app.middleware("http")(security_headers_middleware)
# Trace ID middleware (correlation across logs and error responses)
app.middleware("http")(trace_id_middleware)

# CORS with an explicit allowlist (no wildcards with credentials)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)

app.include_router(router)
app.include_router(realtime_router)


def main():
    """Entry point for the application."""
    uvicorn.run(
        "taskhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
