"""DuckDB setup for job postings."""
from __future__ import annotations

import logging
from pathlib import Path

import duckdb

from jobboard.config import settings

logger = logging.getLogger(__name__)

_con: duckdb.DuckDBPyConnection | None = None


def get_connection(db_path: Path | None = None) -> duckdb.DuckDBPyConnection:
    global _con
    if _con is None:
        path = db_path or settings.db_path
        path.parent.mkdir(parents=True, exist_ok=True)
        _con = duckdb.connect(str(path))
        _initialize_tables(_con)
        logger.info("DuckDB connected at %s", path)
    return _con


def _initialize_tables(con: duckdb.DuckDBPyConnection) -> None:
    con.execute("""
        CREATE TABLE IF NOT EXISTS jobs (
            id VARCHAR PRIMARY KEY,
            publisher_id VARCHAR,
            title VARCHAR,
            specialisation VARCHAR,
            description VARCHAR,
            role_type VARCHAR,
            salary VARCHAR,
            application_deadline TIMESTAMP,
            application_link VARCHAR DEFAULT '',
            uses_embedded_form BOOLEAN DEFAULT FALSE,
            date_posted TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)


def close() -> None:
    global _con
    if _con:
        _con.close()
        _con = None
