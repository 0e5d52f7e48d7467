# ============================================================================
# File: ingestion/runner.py
# Description: Flatten pipeline orchestrator (MongoDB -> DuckDB)
# ============================================================================
"""
Flatten Runner - Orchestrates connect, recreate, stream and load.

Stages run strictly in order, and a failure in any of them aborts the run:
- connect: source reachability, then sink connection
- ddl: drop/create of the sink tables, before any document is read
- extract / write: one document at a time, each row appended immediately

Per-record problems (malformed sub-structures, unparseable ids) never reach
this module: the flattener absorbs them and reports them to diagnostics.
"""

from typing import Any, Dict, Optional
import logging

from core.exceptions import ETLException
from ingestion.base import DocumentSource
from ingestion.loaders.duckdb_loader import DuckDBLoader
from ingestion.progress import ProgressReporter
from ingestion.transformers.flattener import Flattener
from models.base import RunStatus
from models.tables import attribute_table, package_table

logger = logging.getLogger(__name__)


class FlattenRunner:
    """
    Single sequential flatten pipeline.

    Responsibilities:
    - Order the stages so nothing is written before both ends are reachable
    - Stream documents through the flattener into the loader
    - Feed the progress reporter
    - Summarise the run
    """

    def __init__(
        self,
        loader: DuckDBLoader,
        flattener: Optional[Flattener] = None,
        progress: Optional[ProgressReporter] = None
    ):
        self.loader = loader
        self.flattener = flattener or Flattener()
        self.progress = progress
        self.status = RunStatus.RUNNING
        self.documents_processed = 0

    async def run(self, source: DocumentSource) -> Dict[str, Any]:
        """
        Run the pipeline against ``source``.

        Returns:
            Dictionary with run statistics:
            - status: "success"
            - documents_processed: Number of documents read and flattened
            - attribute_rows / package_rows: Rows appended per table
            - diagnostics: Diagnostic event counts

        Raises:
            SourceConnectionError / SinkConnectionError: Startup failure
            SchemaSetupError: Table recreation failed
            DocumentStreamError: Source cursor failed mid-run
            RowWriteError: A row append failed
            ETLException: Any other unexpected failure
        """
        self.status = RunStatus.RUNNING
        self.documents_processed = 0

        try:
            # --------------------------------------------------
            # STAGE 1: CONNECT
            # --------------------------------------------------
            await source.connect()
            self.loader.open()

            # --------------------------------------------------
            # STAGE 2: RECREATE SINK TABLES
            # --------------------------------------------------
            self.loader.recreate_tables()

            # --------------------------------------------------
            # STAGE 3: STREAM -> FLATTEN -> APPEND
            # --------------------------------------------------
            logger.info(f"Streaming documents from {source.source_name}")

            async for document in source.stream():
                for row in self.flattener.flatten(document):
                    self.loader.append(row)

                self.documents_processed += 1
                if self.progress is not None:
                    self.progress.advance()

            if self.progress is not None:
                self.progress.finish()

        except ETLException as e:
            self.status = RunStatus.FAILED
            logger.error(
                f"Flatten pipeline failed at stage {e.stage}: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            raise

        except Exception as e:
            self.status = RunStatus.FAILED
            logger.exception("Unexpected error in flatten pipeline")
            raise ETLException(
                "Unexpected error in flatten pipeline",
                context={
                    "source_name": source.source_name,
                    "documents_processed": self.documents_processed,
                    "rows_written": dict(self.loader.rows_written)
                },
                original_exception=e
            )

        finally:
            await source.close()
            self.loader.close()

        self.status = RunStatus.SUCCESS
        result = {
            "status": self.status.value,
            "documents_processed": self.documents_processed,
            "attribute_rows": self.loader.rows_written[attribute_table.name],
            "package_rows": self.loader.rows_written[package_table.name],
            "diagnostics": self.flattener.diagnostics.snapshot(),
        }

        logger.info(
            f"Flatten run completed: {result['documents_processed']} documents, "
            f"{result['attribute_rows']} attribute rows, {result['package_rows']} package rows"
        )

        return result
