"""Client factories for the document store (MongoDB) and the search index (Elasticsearch)."""

import asyncio
import logging

from elasticsearch import AsyncElasticsearch
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from usefulwork.config import Settings

logger = logging.getLogger(__name__)


class StoreUnavailableError(RuntimeError):
    pass


def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    # Connects lazily; a bad connection string or unreachable host fails on first use.
    return AsyncMongoClient(settings.mongo.connection_string, uuidRepresentation="standard")


def get_mongo_database(client: AsyncMongoClient, settings: Settings) -> AsyncDatabase:
    return client.get_database(settings.mongo.database_name)


def create_elasticsearch_client(settings: Settings) -> AsyncElasticsearch:
    # Parses the URL immediately: a missing port or scheme raises ValueError here.
    return AsyncElasticsearch(settings.elasticsearch.url, max_retries=0, retry_on_timeout=False)


async def _ping_mongo(client: AsyncMongoClient) -> None:
    await client.admin.command("ping")


async def _ping_elasticsearch(client: AsyncElasticsearch) -> None:
    await client.info()


async def verify_connections(
    mongo_client: AsyncMongoClient,
    es_client: AsyncElasticsearch,
    settings: Settings,
) -> None:
    """Ping both stores concurrently and fail with a message naming every unreachable one."""
    results = await asyncio.gather(
        _ping_mongo(mongo_client),
        _ping_elasticsearch(es_client),
        return_exceptions=True,
    )
    # Connection strings may carry credentials; report the database name instead.
    targets = [
        ("MongoDB", settings.mongo.database_name),
        ("Elasticsearch", settings.elasticsearch.url),
    ]

    failures = []
    first_error = None
    for (store, address), result in zip(targets, results):
        if isinstance(result, BaseException):
            failures.append(f"{store} at {address} ({result!r})")
            first_error = first_error or result

    if failures:
        message = "Store(s) unreachable: " + "; ".join(failures)
        logger.error(message)
        raise StoreUnavailableError(message) from first_error

    logger.info("MongoDB and Elasticsearch reachable")
