"""
DuckDB engine management with SQLAlchemy (duckdb_engine dialect)
"""

from pathlib import Path
from typing import Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
import logging

logger = logging.getLogger(__name__)


def build_duckdb_url(db_path: Union[str, Path]) -> str:
    """Build a SQLAlchemy URL for a DuckDB file (or ':memory:')"""
    return f"duckdb:///{db_path}"


def create_sink_engine(db_path: Union[str, Path], echo: bool = False) -> Engine:
    """
    Create the sink engine.
    
    DuckDB allows a single writer per file, so connections are not pooled:
    the loader holds one connection for the whole run.
    """
    url = build_duckdb_url(db_path)
    logger.debug(f"Creating sink engine for {url}")
    return create_engine(url, echo=echo, poolclass=NullPool)
