"""
Floor Plan Table Finder API - Entry Point

This module initializes the FastAPI application. The floor plan and the
route service (with its base grid) are built once on startup; bad
configuration stops the process.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    Config,
    ConfigurationError,
    get_yaml_setting,
    load_config,
    load_floor_plan,
    load_max_expansions,
)
from .processing.route_service import RouteService
from .storage.tables import get_table_directory
from .utils.entry_selector import EntrySelector
from .api.routes import FloorContext, router, set_context

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def build_context(config: Optional[Config] = None) -> FloorContext:
    """Load the floor plan and build the route service and lookups."""
    floor_plan = load_floor_plan()
    strategy = config.default_strategy if config else get_yaml_setting(
        "routing", "default_strategy", default="corridor"
    )
    try:
        service = RouteService(
            floor_plan.corridors,
            strategy=strategy,
            max_expansions=load_max_expansions(),
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    return FloorContext(
        floor_plan=floor_plan,
        service=service,
        tables=get_table_directory(),
        selector=EntrySelector(floor_plan),
        default_width=get_yaml_setting("rendering", "default_width", default=800),
        line_width=get_yaml_setting("rendering", "line_width", default=4),
        marker_radius=get_yaml_setting("rendering", "marker_radius", default=8),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown."""
    # Startup
    logger.info("=" * 60)
    logger.info("FLOOR PLAN TABLE FINDER API - STARTING")
    logger.info("=" * 60)

    try:
        # Load configuration (will fail fast if env vars missing)
        config = load_config()
        logger.info("Configuration loaded successfully")

        context = build_context(config)
        set_context(context)

        plan = context.floor_plan
        logger.info(f"  plane: {plan.width}x{plan.height}")
        logger.info(f"  corridors: {len(plan.corridors)}")
        logger.info(f"  entries: {1 + len(plan.entry_rules)}")
        logger.info(f"  tables: {context.tables.count()}")
        logger.info(f"  default strategy: {context.service.default_strategy}")

        logger.info("=" * 60)
        logger.info(f"Server ready on {config.backend_host}:{config.backend_port}")
        logger.info("=" * 60)

        # Store config and context in app state
        app.state.config = config
        app.state.context = context

        yield

    except ConfigurationError as e:
        logger.error("=" * 60)
        logger.error("CONFIGURATION ERROR")
        logger.error("=" * 60)
        logger.error(str(e))
        logger.error("")
        logger.error("Please check the environment variables and config.yaml.")
        logger.error("See .env.example for required variables.")
        logger.error("=" * 60)
        sys.exit(1)

    # Shutdown
    logger.info("Shutting down...")
    set_context(None)
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    # Load config early to get CORS origins (will fail if config is invalid)
    try:
        config = load_config()
    except ConfigurationError:
        # Let lifespan handle the error with better messaging
        config = None

    app = FastAPI(
        title="Floor Plan Table Finder API",
        description="Corridor-constrained routing from an entry to a table",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins if config else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    # Load config to get port
    config = load_config()

    uvicorn.run(
        "floorroute.main:app",
        host=config.backend_host,
        port=config.backend_port,
        reload=False,
    )
