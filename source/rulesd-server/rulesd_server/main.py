"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from rulesd_core.config import Settings as CoreSettings, configure_logging
from rulesd_core.rules import RuleEngine
from rulesd_server import __version__
from rulesd_server.api.deps import request_id_middleware, setup_exception_handlers
from rulesd_server.api.v1 import bundles, health, rules
from rulesd_server.config import ServerSettings, get_settings

logger = logging.getLogger(__name__)


def create_engine(settings: ServerSettings) -> RuleEngine:
    """Create the rule engine from core settings and server overrides."""
    core_settings = CoreSettings.from_environment()
    if settings.rules_dir:
        core_settings.rules_dir = Path(settings.rules_dir).expanduser()
    return core_settings.create_engine()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Loads the rule index on startup unless an engine was supplied to
    create_app().
    """
    settings = get_settings()

    engine: RuleEngine | None = getattr(app.state, "engine", None)
    if engine is None:
        engine = create_engine(settings)
        app.state.engine = engine

    index = engine.initialize()

    logger.info(f"rules.d Server v{__version__} starting...")
    logger.info(f"Serving {len(index)} rules")
    logger.info(f"Listening on {settings.host}:{settings.port}")

    yield

    logger.info("rules.d Server shutting down...")


def create_app(engine: RuleEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        engine: Rule engine to serve. Built from settings at startup when
            omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="rules.d Server",
        description="rules.d REST API - rule lookup and scenario bundles",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.engine = engine

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup request ID middleware
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_id_middleware)

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include API routers
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(rules.router, prefix="/api/v1")
    app.include_router(bundles.router, prefix="/api/v1")

    return app


def run():
    """Run the server using uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "rulesd_server.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        reload=False,
    )


if __name__ == "__main__":
    run()
