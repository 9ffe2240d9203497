"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request tracing), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orm_pitfalls.core.database import engine, init_db
from orm_pitfalls.core.logging_config import get_logger, setup_logging
from orm_pitfalls.core.monitoring import initialize_logfire

from .api.v1 import health, problems, solutions
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the demonstration tables on startup.
    """
    try:
        logger.info("Starting up ORM Pitfalls Reproducer...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down ORM Pitfalls Reproducer...")
    await engine.dispose()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ORM Pitfalls Reproducer API

    Every endpoint under /problems runs a short script against SQLAlchemy and reports how
    read-only attributes, read-only collection annotations and dataclass equality clash
    with the ORM's instrumentation. /problems/solutions reruns them with ORM-friendly entities.
    """,
    version=constant.API_VERSION,
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app=app, engine=engine)

app.include_router(health.router, tags=["health"])
app.include_router(problems.router, prefix=constant.PROBLEMS_PREFIX, tags=["problems"])
app.include_router(solutions.router, prefix=constant.SOLUTIONS_PREFIX, tags=["solutions"])


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    uvicorn.run(
        "orm_pitfalls.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
