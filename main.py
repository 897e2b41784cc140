import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import Engine

from app.config import Settings, get_settings
from app.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from app.interfaces.api.routes import register_routes
from app.utils import configure_app_timezone

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure the root logger once with the configured level."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release an engine the app created itself."""

    initialize_database(app.state.engine)
    yield
    if app.state.owns_engine:
        app.state.engine.dispose()


def create_app(settings: Settings | None = None, *, engine: Engine | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    configure_logging(settings)
    configure_app_timezone(settings)

    app = FastAPI(title="NydArt notification service", lifespan=lifespan)
    app.state.settings = settings
    app.state.owns_engine = engine is None
    app.state.engine = engine or create_database_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
