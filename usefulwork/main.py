"""FastAPI application entrypoint with store client lifecycle management."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, Optional, Tuple

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from pymongo.errors import PyMongoError

from usefulwork.config import Settings, load_settings
from usefulwork.logging_config import setup_logging
from usefulwork.routes import health_router, work_router
from usefulwork.stores import (
    StoreUnavailableError,
    create_elasticsearch_client,
    create_mongo_client,
    get_mongo_database,
    verify_connections,
)

logger = logging.getLogger(__name__)

DOCS_URL = "/api/docs"


def _create_client(store: str, factory: Callable, settings: Settings) -> Tuple[Any, Optional[StoreUnavailableError]]:
    # A bad connection string or URL fails /useful-work, not startup (unless verification is on).
    try:
        return factory(settings), None
    except (ValueError, PyMongoError) as e:
        logger.error(f"{store} client could not be created | error={e!r}")
        error = StoreUnavailableError(f"{store} client could not be created: {e}")
        error.__cause__ = e
        return None, error


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    mongo_client, mongo_error = _create_client("MongoDB", create_mongo_client, settings)
    search_client, search_error = _create_client("Elasticsearch", create_elasticsearch_client, settings)
    try:
        if settings.verify_connections:
            for error in (mongo_error, search_error):
                if error is not None:
                    raise error
            await verify_connections(mongo_client, search_client, settings)

        app.state.mongo_client = mongo_client
        app.state.database = get_mongo_database(mongo_client, settings) if mongo_client is not None else None
        app.state.mongo_error = mongo_error
        app.state.search_client = search_client
        app.state.search_error = search_error
        logger.info(
            f"Store clients ready | database={settings.mongo.database_name} "
            f"| index={settings.elasticsearch.default_index}"
        )
        yield
    finally:
        if search_client is not None:
            await search_client.close()
        if mongo_client is not None:
            await mongo_client.close()
        logger.info("Store clients closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        docs_url=DOCS_URL,
        openapi_url=f"{DOCS_URL}/openapi.json",
        swagger_ui_oauth2_redirect_url=f"{DOCS_URL}/oauth2-redirect",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(health_router)
    app.include_router(work_router)

    @app.get("/")
    async def root():
        return RedirectResponse(url=DOCS_URL, status_code=302)

    return app


app = create_app()
