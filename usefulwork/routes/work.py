"""The generate -> write -> read endpoint."""

import logging

from elasticsearch import AsyncElasticsearch
from fastapi import APIRouter, Depends, Request, Response
from pymongo.asynchronous.database import AsyncDatabase

from usefulwork.config import Settings
from usefulwork.models import generate_item
from usefulwork.stores import StoreUnavailableError
from usefulwork.work import read_item, write_item

logger = logging.getLogger(__name__)

router = APIRouter(tags=["work"])


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _raise_if_unavailable(request: Request, attr: str) -> None:
    # Set by the lifespan when a client could not be built from its settings.
    error = getattr(request.app.state, attr, None)
    if error is not None:
        raise StoreUnavailableError(str(error)) from error.__cause__


async def get_database(request: Request) -> AsyncDatabase:
    _raise_if_unavailable(request, "mongo_error")
    return request.app.state.database


async def get_search_client(request: Request) -> AsyncElasticsearch:
    _raise_if_unavailable(request, "search_error")
    return request.app.state.search_client


@router.get("/useful-work", response_class=Response)
async def useful_work(
    database: AsyncDatabase = Depends(get_database),
    search_client: AsyncElasticsearch = Depends(get_search_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    index = settings.elasticsearch.default_index
    item = generate_item()

    await write_item(database, search_client, index, item, settings.elasticsearch.refresh)

    # Results are read back only to exercise both stores.
    await read_item(database, search_client, index, item.id, item.name)

    return Response(status_code=200)
