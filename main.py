import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from courier_dispatch import __version__
from courier_dispatch.application.sweeper import (
    start_retention_sweeper,
    stop_retention_sweeper,
)
from courier_dispatch.config import get_settings
from courier_dispatch.infrastructure.database import engine, initialize_database
from courier_dispatch.interfaces.api.errors import register_exception_handlers
from courier_dispatch.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables and run the retention sweeper while serving."""

    initialize_database()
    start_retention_sweeper()
    yield
    stop_retention_sweeper()
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the dispatch API application."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Courier Dispatch", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
