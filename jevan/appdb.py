"""Thin wrappers over a MongoDB client, database and collection."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from jevan.applog import get_logger, get_logger_with_correlation_id

_NO_DOCUMENTS = "mongo: no documents in result"


class NoDocumentError(LookupError):
    """Raised when a single-document query matches nothing."""

    def __init__(self, message: str = _NO_DOCUMENTS) -> None:
        super().__init__(message)


class DatabaseCollection:
    """A collection whose single-document lookups raise when nothing matches."""

    def __init__(self, collection: Any) -> None:
        self._collection = collection

    def find_one(self, filter: Mapping[str, Any]) -> dict[str, Any]:
        document = self._collection.find_one(filter)
        if document is None:
            raise NoDocumentError()
        return document

    def find_one_and_update(
        self, filter: Mapping[str, Any], update: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Update the first match and return it as it was before the update."""
        document = self._collection.find_one_and_update(filter, update)
        if document is None:
            raise NoDocumentError()
        return document

    def insert_one(self, document: Mapping[str, Any]) -> Any:
        return self._collection.insert_one(document)

    def update_one(self, filter: Mapping[str, Any], update: Mapping[str, Any]) -> Any:
        return self._collection.update_one(filter, update)

    def update_many(self, filter: Mapping[str, Any], update: Mapping[str, Any]) -> Any:
        return self._collection.update_many(filter, update)

    def count_documents(self, filter: Mapping[str, Any]) -> int:
        return self._collection.count_documents(filter)

    def find(self, filter: Mapping[str, Any], **kwargs: Any) -> list[dict[str, Any]]:
        """Return every matching document; keyword options go to the driver."""
        with self._collection.find(filter, **kwargs) as cursor:
            return list(cursor)

    def aggregate(self, pipeline: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        with self._collection.aggregate(list(pipeline)) as cursor:
            return list(cursor)

    def delete_one(self, filter: Mapping[str, Any]) -> Any:
        return self._collection.delete_one(filter)

    def delete_many(self, filter: Mapping[str, Any]) -> Any:
        return self._collection.delete_many(filter)

    def distinct(self, field: str, filter: Mapping[str, Any] | None = None) -> list[Any]:
        return self._collection.distinct(field, filter)

    def drop(self) -> None:
        self._collection.drop()

    def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> Any:
        return self._collection.insert_many(list(documents))


class DatabaseClient:
    """A connected client bound to one database."""

    def __init__(self, database_name: str, client: Any) -> None:
        self._database_name = database_name
        self._client = client

    @property
    def db_name(self) -> str:
        return self._database_name

    def disconnect(self) -> None:
        try:
            self._client.close()
        except PyMongoError as exc:
            logger = get_logger(False) or get_logger_with_correlation_id()
            logger.info("Error disconnecting from DB: %s", exc)

    def collection(self, name: str) -> DatabaseCollection:
        return DatabaseCollection(self._client[self._database_name][name])

    def __enter__(self) -> DatabaseClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.disconnect()


class DatabaseFactory:
    """Opens authenticated, verified connections to a MongoDB server."""

    def __init__(
        self,
        uri: str,
        username: str | None = None,
        password: str | None = None,
        database: str | None = None,
        client_factory: Callable[..., Any] = MongoClient,
        timeout: float = 10.0,
    ) -> None:
        self.uri = uri
        self.username = username
        self._password = password
        self.database = database
        self._client_factory = client_factory
        self.timeout = timeout

    def new_db_connection(self, dbname: str | None = None) -> DatabaseClient:
        """Connect, ping the server and return a client for ``dbname``."""
        logger = get_logger_with_correlation_id()
        name = dbname if dbname is not None else self.database
        if not name:
            raise ValueError("a database name is required")

        options: dict[str, Any] = {"serverSelectionTimeoutMS": int(self.timeout * 1000)}
        if self.username is not None:
            options["username"] = self.username
        if self._password is not None:
            options["password"] = self._password

        try:
            client = self._client_factory(self.uri, **options)
        except PyMongoError as exc:
            logger.error("%s", exc)
            raise

        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            logger.error("%s", exc)
            client.close()
            raise

        logger.info("Connected to database: %s", name)
        return DatabaseClient(name, client)