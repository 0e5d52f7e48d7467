"""
Pytest configuration and fixtures
"""

import pytest
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import text

from core.database import create_sink_engine
from core.exceptions import SourceConnectionError
from ingestion.base import DocumentSource


class InMemorySource(DocumentSource):
    """Document source backed by a list, for pipeline tests"""

    def __init__(
        self,
        documents: List[Dict[str, Any]],
        limit: int = 0,
        connect_error: Optional[Exception] = None
    ):
        super().__init__(source_name="memory.biosamples", limit=limit)
        self.documents = documents
        self.connect_error = connect_error
        self.connected = False
        self.closed = False
        self.fetched = 0

    async def connect(self):
        if self.connect_error is not None:
            raise SourceConnectionError(
                "Failed to connect to in-memory source",
                context={"stage": "connect"},
                original_exception=self.connect_error
            )
        self.connected = True

    async def fetch_documents(self) -> AsyncIterator[Dict[str, Any]]:
        for document in self.documents:
            self.fetched += 1
            yield document

    async def close(self):
        self.closed = True


@pytest.fixture
def make_source():
    """Factory for in-memory document sources"""
    return InMemorySource


@pytest.fixture
def sink_path(tmp_path):
    """Path of a fresh DuckDB file"""
    return tmp_path / "biosample_attributes.db"


@pytest.fixture
def sink_engine(sink_path):
    """DuckDB engine on a temporary file"""
    engine = create_sink_engine(sink_path)
    yield engine
    engine.dispose()


@pytest.fixture
def fetch_rows(sink_engine):
    """Read a sink table back as a list of tuples, in insertion order"""

    def _fetch(table_name: str):
        with sink_engine.connect() as conn:
            return [tuple(r) for r in conn.execute(text(f"SELECT * FROM {table_name}"))]

    return _fetch


@pytest.fixture
def mock_biosamples():
    """Mixed batch of well-formed and malformed biosample documents"""
    return [
        {
            "_id": "665f1c0a0000000000000001",
            "id": "123",
            "Attributes": {
                "Attribute": [
                    {"content": "5", "attribute_name": "age"},
                    {"content": "red", "attribute_name": "color"}
                ]
            },
            "Package": {"content": "P1", "display_name": "Microbial"}
        },
        {
            "_id": "665f1c0a0000000000000002",
            "id": "abc",
            "Attributes": {"Attribute": [{"content": "x"}]}
        },
        {
            "_id": "665f1c0a0000000000000003",
            "id": "1",
            "Package": {"content": "P2", "display_name": "Human"}
        },
        {
            "_id": "665f1c0a0000000000000004",
            "id": "7",
            "Attributes": "not an object",
            "Package": ["not", "an", "object"]
        },
        {
            "_id": "665f1c0a0000000000000005",
            "id": "8",
            "Attributes": {
                "Attribute": [
                    {"content": "ok", "attribute_name": "first", "unit": "cm"},
                    "garbage",
                    {"content": 42, "attribute_name": "numeric"},
                    {"content": "also ok", "harmonized_name": "last"}
                ]
            }
        }
    ]
