"""Dual write/read path: one Item goes to MongoDB and Elasticsearch, then comes back from both."""

import asyncio
import logging
import uuid
from typing import Any, List, Optional, Tuple

from elasticsearch import AsyncElasticsearch
from pymongo.asynchronous.database import AsyncDatabase

from usefulwork.logging_config import BOTH_STORES, ELASTICSEARCH, MONGODB, log_store_latency
from usefulwork.models import Item

ITEMS_COLLECTION = "items"
SEARCH_FIELDS = ["id", "name", "description"]


class ItemNotFoundError(LookupError):
    pass


async def _join(*aws) -> List[Any]:
    # Every leg runs to completion before the first failure (in argument order) is raised.
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


@log_store_latency("work.save_item_to_db", MONGODB)
async def save_item_to_db(database: AsyncDatabase, item: Item) -> None:
    collection = database.get_collection(ITEMS_COLLECTION)
    await collection.insert_one(item.to_document())


@log_store_latency("work.save_item_to_es", ELASTICSEARCH)
async def save_item_to_es(client: AsyncElasticsearch, index: str, item: Item, refresh: Optional[str] = None) -> None:
    kwargs = {"refresh": refresh} if refresh else {}
    await client.index(index=index, id=str(item.id), document=item.to_source(), **kwargs)


@log_store_latency("work.get_item_from_db", MONGODB)
async def get_item_from_db(database: AsyncDatabase, item_id: uuid.UUID) -> Item:
    collection = database.get_collection(ITEMS_COLLECTION)
    doc = await collection.find_one({"_id": item_id})
    if doc is None:
        raise ItemNotFoundError(f"Item {item_id} not found in '{ITEMS_COLLECTION}'")
    return Item.from_document(doc)


@log_store_latency("work.get_items_from_es", ELASTICSEARCH)
async def get_items_from_es(client: AsyncElasticsearch, index: str, text: str) -> List[Item]:
    response = await client.search(
        index=index,
        query={"multi_match": {"query": text, "fields": SEARCH_FIELDS}},
    )
    hits = response["hits"]["hits"]
    return [Item.model_validate(hit["_source"]) for hit in hits]


@log_store_latency("work.write_item", BOTH_STORES, level=logging.INFO)
async def write_item(
    database: AsyncDatabase,
    client: AsyncElasticsearch,
    index: str,
    item: Item,
    refresh: Optional[str] = None,
) -> None:
    await _join(
        save_item_to_db(database, item),
        save_item_to_es(client, index, item, refresh),
    )


@log_store_latency("work.read_item", BOTH_STORES, level=logging.INFO)
async def read_item(
    database: AsyncDatabase,
    client: AsyncElasticsearch,
    index: str,
    item_id: uuid.UUID,
    text: str,
) -> Tuple[Item, List[Item]]:
    stored, hits = await _join(
        get_item_from_db(database, item_id),
        get_items_from_es(client, index, text),
    )
    return stored, hits
