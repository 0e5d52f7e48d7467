"""
Script to flatten the configured MongoDB collection into DuckDB
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, ingestion, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_sink_engine
from core.exceptions import ETLException
from core.logging import setup_logging
from ingestion.diagnostics import Diagnostics
from ingestion.extractors.mongo_extractor import MongoExtractor
from ingestion.loaders.duckdb_loader import DuckDBLoader
from ingestion.progress import ProgressReporter
from ingestion.runner import FlattenRunner
from ingestion.transformers.flattener import Flattener

logger = logging.getLogger(__name__)


async def run_etl() -> int:
    """Run one full reload; returns the process exit code"""
    
    source = MongoExtractor(
        uri=settings.MONGO_URI,
        database=settings.MONGO_DB,
        collection=settings.MONGO_COLLECTION,
        limit=settings.LIMIT,
        server_selection_timeout_ms=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
    )
    
    engine = create_sink_engine(settings.OUTPUT_DB)
    
    runner = FlattenRunner(
        loader=DuckDBLoader(engine),
        flattener=Flattener(Diagnostics(enabled=settings.VERBOSE)),
        progress=ProgressReporter(
            total=settings.expected_total,
            log_interval=settings.PROGRESS_LOG_INTERVAL,
        ),
    )
    
    try:
        result = await runner.run(source)
    except ETLException as e:
        logger.error(f"ETL pipeline error: {str(e)}")
        return 1
    finally:
        engine.dispose()
    
    logger.info(f"Processed {result['documents_processed']} biosamples total")
    if result["diagnostics"]:
        logger.info(f"Diagnostics: {result['diagnostics']}")
    return 0


def main():
    setup_logging()
    sys.exit(asyncio.run(run_etl()))


if __name__ == "__main__":
    main()
