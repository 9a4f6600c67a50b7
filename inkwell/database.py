"""
Inkwell Backend - MongoDB Gateway
=================================

What:  Owns the single Motor client shared by every request and hands out the
       blog collection.
How:   The client is created on first use and cached on the gateway. Motor
       manages its own connection pool underneath, so one client per process is
       all the service needs.
Who:   Route handlers receive the collection through the `get_blog_collection`
       FastAPI dependency; the health route calls `ping()`; the lifespan
       handler calls `close()` on shutdown.

There is no locking here: creating the client is synchronous, so on a single
event loop two requests cannot both observe an empty `_client`.
"""

import logging
from typing import Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.server_api import ServerApi

from inkwell.config import settings

logger = logging.getLogger(__name__)


class DatabaseGateway:
    """
    Lazily-opened, process-wide MongoDB connection.

    Attributes:
        _client: Motor client, `None` until the first `get_collection()` call
                 and again after `close()`.
    """

    def __init__(self, url: Optional[str] = None, db_name: Optional[str] = None):
        self._url = url
        self._db_name = db_name
        self._client: Optional[AsyncIOMotorClient] = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _connect(self) -> AsyncIOMotorClient:
        url = self._url or settings.db_url
        client = AsyncIOMotorClient(
            url,
            server_api=ServerApi("1"),
            serverSelectionTimeoutMS=settings.db_server_selection_timeout_ms,
            tz_aware=True,
        )
        logger.info("MongoDB client created for database '%s'", self.database_name)
        return client

    @property
    def database_name(self) -> str:
        return self._db_name or settings.db_name

    def get_database(self) -> AsyncIOMotorDatabase:
        if self._client is None:
            self._client = self._connect()
        return self._client[self.database_name]

    def get_collection(self, name: Optional[str] = None) -> AsyncIOMotorCollection:
        """Return a collection handle, opening the client on first call."""
        return self.get_database()[name or settings.blog_collection]

    async def ping(self) -> bool:
        """
        Round-trip a `ping` command.

        Returns:
            True when the server answered, False on any driver error.
        """
        try:
            await self.get_database().command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False

    def close(self) -> None:
        """Close the client and drop it so a later call reconnects."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB client closed")


db_gateway = DatabaseGateway()


def get_blog_collection() -> AsyncIOMotorCollection:
    """
    FastAPI dependency providing the blog collection.

    Example:
        @router.get("/blogs/latest")
        async def latest(collection=Depends(get_blog_collection)):
            ...
    """
    return db_gateway.get_collection()
