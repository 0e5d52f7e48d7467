"""
Load flattened rows into DuckDB (recreate-on-start, append-only)
"""

from typing import Dict, Optional

from sqlalchemy import insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable, DropTable

from core.exceptions import RowWriteError, SchemaSetupError, SinkConnectionError
from models.tables import SINK_TABLES, attribute_table, package_table
from schemas.biosample import AttributeRow, PackageRow, SinkRow
import logging

logger = logging.getLogger(__name__)


class DuckDBLoader:
    """
    Append flattened rows to the DuckDB sink.

    Ensures:
    - Tables are dropped and recreated once per run (full reload)
    - One INSERT statement per table, built once for the whole run
    - Each row append is committed on its own; a failure is fatal and
      leaves previously appended rows in place
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._connection: Optional[Connection] = None
        self._statements = {
            AttributeRow: (attribute_table, insert(attribute_table)),
            PackageRow: (package_table, insert(package_table)),
        }
        self.rows_written: Dict[str, int] = {table.name: 0 for table in SINK_TABLES}

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise SinkConnectionError(
                "Sink connection is not open",
                context={"stage": "connect", "database": str(self.engine.url)}
            )
        return self._connection

    def open(self):
        """Open the single sink connection used for the run"""
        if self._connection is not None:
            return
        try:
            self._connection = self.engine.connect()
        except SQLAlchemyError as e:
            raise SinkConnectionError(
                "Failed to open sink database",
                context={
                    "stage": "connect",
                    "operation": "CONNECT",
                    "database": str(self.engine.url)
                },
                original_exception=e
            )
        logger.info(f"Opened sink database {self.engine.url.database}")

    def recreate_tables(self):
        """Drop and recreate the attribute and package tables"""
        conn = self.connection
        operation = "DROP"
        table_name = None

        try:
            for table in SINK_TABLES:
                table_name = table.name
                conn.execute(DropTable(table, if_exists=True))

            operation = "CREATE"
            for table in SINK_TABLES:
                table_name = table.name
                conn.execute(CreateTable(table))

            conn.commit()
        except SQLAlchemyError as e:
            self._rollback(conn)
            raise SchemaSetupError(
                f"Failed to {operation.lower()} sink table {table_name}",
                context={
                    "stage": "ddl",
                    "operation": operation,
                    "table_name": table_name
                },
                original_exception=e
            )

        self.rows_written = {table.name: 0 for table in SINK_TABLES}
        logger.info(f"Recreated sink tables: {', '.join(t.name for t in SINK_TABLES)}")

    def append(self, row: SinkRow):
        """Insert and commit a single row"""
        table, stmt = self._statements[type(row)]
        conn = self.connection

        try:
            conn.execute(stmt, row.model_dump())
            conn.commit()
        except SQLAlchemyError as e:
            self._rollback(conn)
            raise RowWriteError(
                f"Failed to append row to {table.name}",
                context={
                    "stage": "write",
                    "operation": "INSERT",
                    "table_name": table.name,
                    "row_id": row.id,
                    "rows_written": self.rows_written[table.name]
                },
                original_exception=e
            )

        self.rows_written[table.name] += 1

    def close(self):
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def _rollback(self, conn: Connection):
        # Keep the original failure as the raised error
        try:
            conn.rollback()
        except SQLAlchemyError as e:
            logger.warning(f"Rollback on sink connection failed: {e}")
