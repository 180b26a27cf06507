"""Application settings read from an env file and the process environment."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi, ServerApiVersion

from jevan.appdb import DatabaseClient
from jevan.applog import get_logger_with_correlation_id

HTTP_PORT = "HTTP_PORT"
MONGO_URI = "MONGO_URI"
MONGO_DATABASE = "MONGO_DATABASE"

MONGO_CARTS_COLLECTION = "carts"
MONGO_ORDERS_COLLECTION = "orders"
MONGO_PRODUCTS_COLLECTION = "products"
MONGO_USERS_COLLECTION = "users"


@dataclass
class ApplicationConfig:
    """Port to listen on and the connected database client."""

    http_port: str
    db_client: DatabaseClient


def load_application_config(
    env_file: str | os.PathLike[str] = ".env",
    client_factory: Callable[..., Any] = MongoClient,
) -> ApplicationConfig:
    """Load ``env_file`` into the environment and connect to MongoDB.

    Variables already present in the environment are not overridden.
    Raises ``FileNotFoundError`` when the env file does not exist.
    """
    logger = get_logger_with_correlation_id()
    path = Path(env_file)
    if not path.is_file():
        raise FileNotFoundError(f"open {env_file}: no such file or directory")
    load_dotenv(path, override=False)

    uri = os.environ.get(MONGO_URI, "")
    try:
        client = client_factory(uri, server_api=ServerApi(ServerApiVersion.V1))
    except PyMongoError as exc:
        logger.error("Error while connecting db, error: %s", exc)
        raise

    logger.info("You successfully connected to MongoDB!")
    db_client = DatabaseClient(os.environ.get(MONGO_DATABASE, ""), client)
    return ApplicationConfig(
        http_port=os.environ.get(HTTP_PORT, ""),
        db_client=db_client,
    )