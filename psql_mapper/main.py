"""psql-mapper API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly: health probes first, then the resource catch-all
    - The Registry is built in the lifespan, before the first request is accepted,
      and handed to the RequestDispatcher stored on app.state
    - An introspection failure aborts startup (the exception leaves the lifespan)
    - Global error handlers render every failure as a {status, msg} envelope
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from psql_mapper.api.error_handlers import register_error_handlers
from psql_mapper.api.routes import health, resources
from psql_mapper.config import get_settings
from psql_mapper.infrastructure.database import init_db
from psql_mapper.infrastructure.observability import setup_logging
from psql_mapper.services.crud_engine import CrudEngine
from psql_mapper.services.dispatcher import RequestDispatcher
from psql_mapper.services.registry_builder import build_registry
from psql_mapper.services.schema_introspector import SchemaIntrospector

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    try:
        async with db.connection() as conn:
            registry = await build_registry(
                SchemaIntrospector(conn),
                settings.path_prefix,
                qualified_column_types=settings.qualified_column_types,
            )
    except Exception:
        logger.critical("Schema introspection failed; refusing to serve", exc_info=True)
        await db.dispose()
        raise

    app.state.db = db
    app.state.dispatcher = RequestDispatcher(registry, CrudEngine(db))
    logger.info("psql-mapper API started")
    yield
    logger.info("psql-mapper API shutting down")
    await db.dispose()


app = FastAPI(
    title="psql-mapper", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(resources.router)

register_error_handlers(app)
