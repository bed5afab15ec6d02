"""Process-wide settings read once from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_MONGODB_CONNECTION_STRING = "mongodb://localhost:27017"
DEFAULT_MONGODB_DATABASE_NAME = "useful_work"
DEFAULT_ELASTICSEARCH_URL = "http://localhost:9200"
DEFAULT_ELASTICSEARCH_INDEX = "items"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class MongoSettings:
    connection_string: str
    database_name: str


@dataclass(frozen=True)
class ElasticSearchSettings:
    url: str
    default_index: str
    refresh: Optional[str] = None


@dataclass(frozen=True)
class Settings:
    mongo: MongoSettings
    elasticsearch: ElasticSearchSettings
    app_title: str = "My API"
    app_version: str = "v1"
    log_level: str = "INFO"
    verify_connections: bool = False
    host: str = "127.0.0.1"
    port: str = "8000"


def _as_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build a :class:`Settings` from ``environ`` (``os.environ`` after loading ``.env`` by default).

    Connection values are taken as-is; a malformed connection string or URL
    only surfaces when a store is first used.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    # ELASTICSEARCH_REFRESH is passed straight to the index call ("true", "wait_for").
    refresh = environ.get("ELASTICSEARCH_REFRESH") or None

    return Settings(
        mongo=MongoSettings(
            connection_string=environ.get("MONGODB_CONNECTION_STRING", DEFAULT_MONGODB_CONNECTION_STRING),
            database_name=environ.get("MONGODB_DATABASE_NAME", DEFAULT_MONGODB_DATABASE_NAME),
        ),
        elasticsearch=ElasticSearchSettings(
            url=environ.get("ELASTICSEARCH_URL", DEFAULT_ELASTICSEARCH_URL),
            default_index=environ.get("ELASTICSEARCH_DEFAULT_INDEX", DEFAULT_ELASTICSEARCH_INDEX),
            refresh=refresh,
        ),
        app_title=environ.get("APP_TITLE", "My API"),
        app_version=environ.get("APP_VERSION", "v1"),
        log_level=environ.get("LOG_LEVEL", "INFO"),
        verify_connections=_as_bool(environ.get("VERIFY_CONNECTIONS")),
        host=environ.get("HOST", "127.0.0.1"),
        port=environ.get("PORT", "8000"),
    )
