"""
Core utilities and configuration for the biosample flattening ETL.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    database: DuckDB engine creation (SQLAlchemy + duckdb_engine)
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import create_sink_engine
    from core.exceptions import SourceConnectionError, RowWriteError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Open the sink
    engine = create_sink_engine(settings.OUTPUT_DB)
"""

__all__ = [
    "settings",
    "create_sink_engine",
    "setup_logging",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "SourceConnectionError",
    "DocumentStreamError",
    "TransformationError",
    "ShapeMismatchError",
    "LoadError",
    "DatabaseError",
    "SinkConnectionError",
    "SchemaSetupError",
    "RowWriteError",
]
