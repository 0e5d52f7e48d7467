"""
Abstract base class for document sources
"""

from abc import ABC, abstractmethod
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict

from core.exceptions import DocumentStreamError
import logging

logger = logging.getLogger(__name__)


class DocumentSource(ABC):
    """
    Abstract base class for all document sources.

    Responsibilities:
    - Connection lifecycle (connect / close)
    - Single-pass, ordered document stream
    - Enforcing the document cap (limit=0 means unbounded)
    """

    def __init__(self, source_name: str, limit: int = 0):
        self.source_name = source_name
        self.limit = limit
        self.documents_read = 0
        self._consumed = False

    @abstractmethod
    async def connect(self):
        """
        Connect to the source.

        Raises:
            SourceConnectionError: If the source is unreachable
        """
        pass

    @abstractmethod
    def fetch_documents(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield raw documents in source order"""
        pass

    async def close(self):
        """Release the source connection"""
        pass

    async def stream(self) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield at most ``limit`` documents, once.

        Raises:
            DocumentStreamError: If the stream has already been consumed
        """
        if self._consumed:
            raise DocumentStreamError(
                "Document stream is single-pass and was already consumed",
                context={"stage": "extract", "source_name": self.source_name}
            )
        self._consumed = True

        if self._cap_reached():
            return

        async with aclosing(self.fetch_documents()) as documents:
            async for document in documents:
                self.documents_read += 1
                yield document
                # Stop before pulling a document past the cap
                if self._cap_reached():
                    break

        logger.info(f"Read {self.documents_read} documents from {self.source_name}")

    def _cap_reached(self) -> bool:
        return self.limit > 0 and self.documents_read >= self.limit

    async def __aenter__(self) -> "DocumentSource":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
