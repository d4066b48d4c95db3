# zcatalog/zstore.py
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.results import DeleteResult, InsertOneResult

from zcatalog.config import Settings
from zcatalog.documents import to_stored
from zcatalog.safe_result import SafeResult

logger = logging.getLogger(__name__)

JsonDict = Dict[str, Any]
Pipeline = List[JsonDict]


class ZStore(ABC):
    """
    Collection contract shared by the MongoDB store and the in-memory store.

    Every operation returns a :class:`SafeResult`; failures are logged and
    wrapped instead of raised.
    """

    def __enter__(self) -> "ZStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ---------- Result helpers ----------
    @staticmethod
    def ok(data: Any = None) -> SafeResult:
        return SafeResult.ok(data)

    @staticmethod
    def fail(error: str, data: Any = None, exc: Optional[Exception] = None) -> SafeResult:
        return SafeResult.fail(error, data=data, exc=exc)

    # ---------- Contract ----------
    @abstractmethod
    def insert(self, collection: str, document: JsonDict) -> SafeResult:
        """Insert one document; data is ``{"inserted_id": ObjectId}``."""

    @abstractmethod
    def find_one(self, collection: str, query: JsonDict) -> SafeResult:
        """First matching document, or ``None`` when nothing matches."""

    @abstractmethod
    def find(self, collection: str, query: Optional[JsonDict] = None) -> SafeResult:
        """All matching documents in natural order."""

    @abstractmethod
    def delete_all(self, collection: str) -> SafeResult:
        """Remove every document; data is ``{"deleted_count": n}``."""

    @abstractmethod
    def aggregate(self, collection: str, pipeline: Pipeline) -> SafeResult:
        """Run an aggregation pipeline; data is the list of result documents."""

    @abstractmethod
    def count(self, collection: str, query: Optional[JsonDict] = None) -> SafeResult:
        """Number of matching documents; data is ``{"count": n}``."""

    def close(self) -> None:
        """Release the store's resources."""


class ZMongoStore(ZStore):
    """Synchronous MongoDB store built on pymongo."""

    def __init__(
        self,
        db: Optional[Database] = None,
        *,
        uri: Optional[str] = None,
        db_name: Optional[str] = None,
    ):
        if db is not None:
            self.db = db
        else:
            if uri is None or db_name is None:
                settings = Settings.from_env()
                uri = uri or settings.mongo_uri
                db_name = db_name or settings.database_name
            client = MongoClient(uri)
            self.db = client[db_name]
            logger.info("Connected to MongoDB database '%s'.", db_name)

    @staticmethod
    def _parse_mongo_result(res: Any) -> Dict[str, Any]:
        """Converts raw PyMongo result objects into plain dicts."""
        if isinstance(res, InsertOneResult):
            return {"inserted_id": res.inserted_id, "acknowledged": res.acknowledged}
        if isinstance(res, DeleteResult):
            return {"deleted_count": res.deleted_count, "acknowledged": res.acknowledged}
        return {"raw_result": str(res)}

    def _failed(self, operation: str, collection: str, e: Exception) -> SafeResult:
        logger.error("%s on '%s' failed: %s", operation, collection, e)
        return self.fail(str(e), exc=e)

    def close(self) -> None:
        """Closes the underlying MongoDB client connection."""
        if self.db is not None and self.db.client is not None:
            self.db.client.close()
            logger.info("MongoDB connection closed.")

    # ---------- CRUD ----------
    def insert(self, collection: str, document: JsonDict) -> SafeResult:
        try:
            res = self.db[collection].insert_one(to_stored(document))
            return self.ok(self._parse_mongo_result(res))
        except PyMongoError as e:
            return self._failed("insert", collection, e)

    def find_one(self, collection: str, query: JsonDict) -> SafeResult:
        try:
            return self.ok(self.db[collection].find_one(query))
        except PyMongoError as e:
            return self._failed("find_one", collection, e)

    def find(self, collection: str, query: Optional[JsonDict] = None) -> SafeResult:
        try:
            cursor = self.db[collection].find(query or {})
            return self.ok(list(cursor))
        except PyMongoError as e:
            return self._failed("find", collection, e)

    def delete_all(self, collection: str) -> SafeResult:
        try:
            res = self.db[collection].delete_many({})
            return self.ok(self._parse_mongo_result(res))
        except PyMongoError as e:
            return self._failed("delete_all", collection, e)

    def aggregate(self, collection: str, pipeline: Pipeline) -> SafeResult:
        try:
            return self.ok(list(self.db[collection].aggregate(pipeline)))
        except PyMongoError as e:
            return self._failed("aggregate", collection, e)

    def count(self, collection: str, query: Optional[JsonDict] = None) -> SafeResult:
        try:
            return self.ok({"count": self.db[collection].count_documents(query or {})})
        except PyMongoError as e:
            return self._failed("count", collection, e)
