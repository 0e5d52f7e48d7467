"""
Flattening pipeline components.

This package contains every component between the document store and the
DuckDB sink:

Modules:
    base: Abstract document source (single-pass, capped stream)
    runner: Orchestrator for connect, recreate, stream and load
    diagnostics: Verbose-gated reporting of decode failures and drift
    progress: Processed-document progress logging

Subpackages:
    extractors: Document sources (MongoDB)
    transformers: Shape decoder, row identifier policy and flattener
    loaders: DuckDB loader with recreate-on-start tables

Architecture:
    Documents are processed strictly one at a time:

    1. Extract - pull the next document from the source cursor
    2. Transform - flatten it into package/attribute rows
    3. Load - append each row to DuckDB as soon as it is produced

    Malformed sub-structures are skipped per row. Connection, DDL and
    write failures abort the run.

Usage:
    from ingestion.extractors.mongo_extractor import MongoExtractor
    from ingestion.loaders.duckdb_loader import DuckDBLoader
    from ingestion.runner import FlattenRunner

Example:
    source = MongoExtractor(
        uri="mongodb://localhost:27017",
        database="biosamples",
        collection="biosamples",
        limit=100
    )
    runner = FlattenRunner(DuckDBLoader(create_sink_engine("out.db")))
    result = await runner.run(source)

    print(f"Loaded {result['attribute_rows']} attribute rows")
"""

__all__ = [
    "DocumentSource",
    "FlattenRunner",
    "MongoExtractor",
    "Flattener",
    "Diagnostics",
    "ProgressReporter",
    "DuckDBLoader",
]
