"""Load tool: generates items and writes each one to MongoDB and Elasticsearch."""

import argparse
import asyncio
from typing import List, Optional

from usefulwork.config import Settings, load_settings
from usefulwork.logging_config import setup_logging
from usefulwork.models import Item, generate_item
from usefulwork.stores import create_elasticsearch_client, create_mongo_client, get_mongo_database
from usefulwork.work import write_item

DEFAULT_COUNT = 100
DEFAULT_CONCURRENCY = 16


async def seed(database, search_client, settings: Settings, count: int, concurrency: int) -> List[Item]:
    items = [generate_item() for _ in range(count)]
    index = settings.elasticsearch.default_index

    for i in range(0, len(items), concurrency):
        batch = items[i : i + concurrency]
        await asyncio.gather(
            *(write_item(database, search_client, index, item, settings.elasticsearch.refresh) for item in batch)
        )
        print(f"Wrote {i + len(batch)} / {len(items)} items")

    return items


async def run(count: int, concurrency: int, settings: Optional[Settings] = None) -> List[Item]:
    settings = settings or load_settings()
    mongo_client = create_mongo_client(settings)
    search_client = create_elasticsearch_client(settings)
    try:
        database = get_mongo_database(mongo_client, settings)
        return await seed(database, search_client, settings, count, concurrency)
    finally:
        await search_client.close()
        await mongo_client.close()


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="number of items to write")
    parser.add_argument("--concurrency", type=int, default=DEFAULT_CONCURRENCY, help="items written at once")
    args = parser.parse_args(argv)

    if args.count < 0 or args.concurrency < 1:
        parser.error("--count must be >= 0 and --concurrency >= 1")

    settings = load_settings()
    setup_logging(settings.log_level)

    print(f"Seeding {args.count} items...")
    items = asyncio.run(run(args.count, args.concurrency, settings))
    print(f"Seeded {len(items)} items into MongoDB and Elasticsearch")


if __name__ == "__main__":
    main()
