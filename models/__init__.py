"""
SQLAlchemy table definitions for the DuckDB sink.

This package defines the sink schema using SQLAlchemy Core tables:

Models:
    base: Shared MetaData and enums (RowShape, StructuralAbsence, RunStatus)
    tables: ``attribute`` and ``package`` tables

Database Schema:
    attribute(content VARCHAR, attribute_name VARCHAR, id BIGINT,
              harmonized_name VARCHAR, display_name VARCHAR, unit VARCHAR)
    package(content VARCHAR, display_name VARCHAR, id BIGINT)

    Tables have no primary key: rows are appended without deduplication
    and both tables are dropped and recreated at the start of every run.

Usage:
    from models.tables import attribute_table, package_table
    from models.base import metadata, RowShape, StructuralAbsence
"""

__all__ = [
    "metadata",
    "RowShape",
    "StructuralAbsence",
    "RunStatus",
    "attribute_table",
    "package_table",
    "SINK_TABLES",
]
