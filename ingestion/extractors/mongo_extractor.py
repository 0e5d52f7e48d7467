"""
MongoDB document source using the asyncio pymongo client
"""

from typing import Any, AsyncIterator, Callable, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from ingestion.base import DocumentSource
from core.exceptions import DocumentStreamError, SourceConnectionError
import logging

logger = logging.getLogger(__name__)


def redact_uri(uri: str) -> str:
    """Strip credentials from a connection string before logging it"""
    parts = urlsplit(uri)
    if "@" not in parts.netloc:
        return uri
    host = parts.netloc.rsplit("@", 1)[1]
    return urlunsplit(parts._replace(netloc=f"***@{host}"))


class MongoExtractor(DocumentSource):
    """
    Stream biosample documents from a MongoDB collection.

    Features:
    - Reachability check (``ping``) at connect time
    - Empty-filter query, capped server-side with ``limit``
    - Driver errors mapped to pipeline exceptions with stage context
    """

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        limit: int = 0,
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., Any] = AsyncMongoClient
    ):
        super().__init__(source_name=f"{database}.{collection}", limit=limit)
        self.uri = uri
        self.database = database
        self.collection_name = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self._collection: Optional[Any] = None

    def _context(self, stage: str) -> Dict[str, Any]:
        return {
            "stage": stage,
            "source_uri": redact_uri(self.uri),
            "database": self.database,
            "collection": self.collection_name,
        }

    async def connect(self):
        logger.info(f"Connecting to MongoDB at {redact_uri(self.uri)}")

        try:
            self._client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms
            )
            await self._client.admin.command("ping")
        except PyMongoError as e:
            await self.close()
            raise SourceConnectionError(
                "Failed to connect to MongoDB",
                context=self._context("connect"),
                original_exception=e
            )

        self._collection = self._client[self.database][self.collection_name]

    async def fetch_documents(self) -> AsyncIterator[Dict[str, Any]]:
        if self._collection is None:
            raise SourceConnectionError(
                "MongoDB source is not connected",
                context=self._context("connect")
            )

        # pymongo treats limit=0 as "no limit"
        cursor = self._collection.find({}, limit=max(self.limit, 0))
        read = 0

        try:
            async for document in cursor:
                read += 1
                yield document
        except PyMongoError as e:
            raise DocumentStreamError(
                "MongoDB cursor failed while reading documents",
                context={**self._context("extract"), "documents_read": read},
                original_exception=e
            )
        finally:
            await cursor.close()

    async def close(self):
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._collection = None
