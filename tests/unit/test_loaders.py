"""
Unit tests for the DuckDB loader
"""

import pytest
from unittest.mock import MagicMock
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import RowWriteError, SchemaSetupError, SinkConnectionError
from ingestion.loaders.duckdb_loader import DuckDBLoader
from schemas.biosample import AttributeRow, PackageRow


def _columns(engine, table_name):
    with engine.connect() as conn:
        result = conn.execute(
            text(
                "SELECT column_name, data_type FROM information_schema.columns "
                "WHERE table_name = :table ORDER BY ordinal_position"
            ),
            {"table": table_name}
        )
        return [tuple(r) for r in result]


@pytest.fixture
def loader(sink_engine):
    loader = DuckDBLoader(sink_engine)
    loader.open()
    yield loader
    loader.close()


class TestDuckDBLoader:
    """Test DuckDB loader functionality"""
    
    def test_recreate_tables_creates_fixed_schema(self, sink_engine, loader):
        loader.recreate_tables()
        loader.close()
        
        assert _columns(sink_engine, "attribute") == [
            ("content", "VARCHAR"),
            ("attribute_name", "VARCHAR"),
            ("id", "BIGINT"),
            ("harmonized_name", "VARCHAR"),
            ("display_name", "VARCHAR"),
            ("unit", "VARCHAR"),
        ]
        assert _columns(sink_engine, "package") == [
            ("content", "VARCHAR"),
            ("display_name", "VARCHAR"),
            ("id", "BIGINT"),
        ]
    
    def test_append_rows(self, loader, fetch_rows):
        loader.recreate_tables()
        loader.append(AttributeRow(content="5", attribute_name="age", id=123))
        loader.append(AttributeRow(content="red", attribute_name="color", id=123, unit="nm"))
        loader.append(PackageRow(content="P1", display_name="Microbial", id=123))
        
        assert loader.rows_written == {"attribute": 2, "package": 1}
        loader.close()
        
        assert fetch_rows("attribute") == [
            ("5", "age", 123, "", "", ""),
            ("red", "color", 123, "", "", "nm"),
        ]
        assert fetch_rows("package") == [("P1", "Microbial", 123)]
    
    def test_recreate_discards_previous_rows(self, sink_engine, fetch_rows):
        first = DuckDBLoader(sink_engine)
        first.open()
        first.recreate_tables()
        first.append(PackageRow(content="old", id=1))
        first.close()
        
        second = DuckDBLoader(sink_engine)
        second.open()
        second.recreate_tables()
        assert second.rows_written == {"attribute": 0, "package": 0}
        second.append(PackageRow(content="new", id=2))
        second.close()
        
        assert fetch_rows("package") == [("new", "", 2)]
    
    def test_rows_are_not_deduplicated(self, loader, fetch_rows):
        row = AttributeRow(content="dup", id=1)
        
        loader.recreate_tables()
        loader.append(row)
        loader.append(row)
        loader.close()
        
        assert len(fetch_rows("attribute")) == 2
    
    def test_close_is_idempotent(self, loader):
        loader.close()
        loader.close()
        
        with pytest.raises(SinkConnectionError):
            loader.append(PackageRow(id=1))
    
    def test_append_without_open_connection_fails(self, sink_engine):
        loader = DuckDBLoader(sink_engine)
        
        with pytest.raises(SinkConnectionError):
            loader.append(PackageRow(id=1))
    
    def test_open_failure_raises_sink_connection_error(self):
        engine = MagicMock()
        engine.connect.side_effect = SQLAlchemyError("unable to open database file")
        
        loader = DuckDBLoader(engine)
        
        with pytest.raises(SinkConnectionError) as exc_info:
            loader.open()
        
        assert exc_info.value.stage == "connect"
    
    def test_ddl_failure_raises_schema_setup_error(self):
        engine = MagicMock()
        conn = engine.connect.return_value
        conn.execute.side_effect = SQLAlchemyError("read-only database")
        
        loader = DuckDBLoader(engine)
        loader.open()
        
        with pytest.raises(SchemaSetupError) as exc_info:
            loader.recreate_tables()
        
        assert exc_info.value.stage == "ddl"
        assert exc_info.value.context["operation"] == "DROP"
        assert exc_info.value.context["table_name"] == "attribute"
        conn.rollback.assert_called_once()
    
    def test_write_failure_raises_row_write_error(self):
        engine = MagicMock()
        conn = engine.connect.return_value
        
        loader = DuckDBLoader(engine)
        loader.open()
        loader.recreate_tables()
        
        conn.execute.side_effect = SQLAlchemyError("disk full")
        
        with pytest.raises(RowWriteError) as exc_info:
            loader.append(AttributeRow(content="x", id=3))
        
        error = exc_info.value
        assert error.stage == "write"
        assert error.context["table_name"] == "attribute"
        assert error.context["row_id"] == 3
        assert loader.rows_written["attribute"] == 0
    
    def test_ddl_failure_survives_failed_rollback(self):
        engine = MagicMock()
        conn = engine.connect.return_value
        conn.execute.side_effect = SQLAlchemyError("read-only database")
        conn.rollback.side_effect = SQLAlchemyError("connection lost")
        
        loader = DuckDBLoader(engine)
        loader.open()
        
        with pytest.raises(SchemaSetupError) as exc_info:
            loader.recreate_tables()
        
        assert exc_info.value.stage == "ddl"
        assert "read-only database" in str(exc_info.value.original_exception)
    
    def test_write_failure_survives_failed_rollback(self):
        engine = MagicMock()
        conn = engine.connect.return_value
        
        loader = DuckDBLoader(engine)
        loader.open()
        loader.recreate_tables()
        
        conn.execute.side_effect = SQLAlchemyError("disk full")
        conn.rollback.side_effect = SQLAlchemyError("connection lost")
        
        with pytest.raises(RowWriteError) as exc_info:
            loader.append(PackageRow(content="x", id=4))
        
        error = exc_info.value
        assert error.stage == "write"
        assert error.context["table_name"] == "package"
        assert "disk full" in str(error.original_exception)
    
    def test_each_append_is_committed(self):
        engine = MagicMock()
        conn = engine.connect.return_value
        
        loader = DuckDBLoader(engine)
        loader.open()
        loader.recreate_tables()
        conn.commit.reset_mock()
        
        for i in range(3):
            loader.append(PackageRow(content=f"p{i}", id=i))
        
        assert conn.commit.call_count == 3
    
    def test_insert_statement_is_built_once(self):
        engine = MagicMock()
        conn = engine.connect.return_value
        
        loader = DuckDBLoader(engine)
        loader.open()
        loader.append(AttributeRow(id=1))
        loader.append(AttributeRow(id=2))
        
        first_stmt = conn.execute.call_args_list[0].args[0]
        second_stmt = conn.execute.call_args_list[1].args[0]
        assert first_stmt is second_stmt
