"""MongoDB adapter for profile and subscription documents.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from pymongo import MongoClient
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database

logger = logging.getLogger("whatcanicook.mongo")

USERS_COLLECTION = "users"
PREMIUM_USERS_COLLECTION = "premiumUsers"


class MongoAdapter:
    """Owns the MongoClient; constructed once at startup and shared."""

    def __init__(self, uri: str, db_name: str = "whatcanicook", client: Optional[MongoClient] = None):
        self.uri = uri
        self.db_name = db_name
        self._client = client
        self._db: Optional[Database] = client[db_name] if client is not None else None

    # ------------------ Connection ------------------
    def connect(self) -> "MongoAdapter":
        if self._db is not None:
            return self
        self._client = MongoClient(self.uri)
        self._db = self._client[self.db_name]
        self._client.admin.command("ping")
        logger.info("Connected to MongoDB (database: %s)", self.db_name)
        return self

    def close(self):
        """Close MongoDB connection."""
        try:
            if self._client is not None:
                self._client.close()
                logger.info("MongoDB client closed")
        finally:
            self._client = None
            self._db = None

    @property
    def db(self) -> Database:
        if self._db is None:
            raise RuntimeError("MongoAdapter is not connected")
        return self._db

    def collection(self, name: str) -> Collection:
        return self.db[name]

    @property
    def users(self) -> Collection:
        return self.collection(USERS_COLLECTION)

    @property
    def premium_users(self) -> Collection:
        return self.collection(PREMIUM_USERS_COLLECTION)

    @contextmanager
    def transaction(self) -> Iterator[ClientSession]:
        """Multi-document transaction; needs a replica set or sharded cluster."""
        if self._client is None:
            raise RuntimeError("MongoAdapter is not connected")
        with self._client.start_session() as session:
            with session.start_transaction():
                yield session

    def ping(self) -> bool:
        try:
            self.db.client.admin.command("ping")
            return True
        except Exception:
            logger.exception("MongoDB ping failed")
            return False
