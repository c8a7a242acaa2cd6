import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notifier.interfaces.api.dependencies import get_session_factory
from notifier.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database when the service starts."""

    get_session_factory()
    yield


def create_app() -> FastAPI:
    """Create and configure the notification dispatch service."""

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="PoultryMarket notifications", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
