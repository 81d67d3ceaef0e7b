"""Database utilities for the voters store.

Provides reusable functions for:
- The ``voters`` table schema (columns mirror the survey table the dashboard
  was built against)
- Batch inserts and small query helpers
"""

import sqlite3
from typing import Any, Dict, Iterable, List, Mapping

VOTERS_TABLE = "voters"

# Column order used by the schema and by insert_voters().
VOTER_COLUMNS = (
    "id",
    "voter_id",
    "full_name",
    "eng_full_name",
    "age",
    "gender",
    "house_number",
    "colony_name",
    "assigned_colony_name",
    "updated_mobile_no",
    "booth_number",
    "booth_name",
    "booth_address",
    "volunteer_name",
    "voting_status",
    "voting_paid",
    "voting_in_transit",
    "created_at",
    "updated_at",
)

VOTERS_DDL = f"""
    CREATE TABLE IF NOT EXISTS {VOTERS_TABLE} (
        id INTEGER PRIMARY KEY,
        voter_id TEXT,
        full_name TEXT,
        eng_full_name TEXT,
        age TEXT,
        gender TEXT,
        house_number TEXT,
        colony_name TEXT,
        assigned_colony_name TEXT,
        updated_mobile_no TEXT,
        booth_number TEXT,
        booth_name TEXT,
        booth_address TEXT,
        volunteer_name TEXT,
        voting_status TEXT,
        voting_paid TEXT,
        voting_in_transit TEXT,
        created_at TEXT,
        updated_at TEXT
    )
"""

_INDEXES = (
    f"CREATE INDEX IF NOT EXISTS idx_voters_booth ON {VOTERS_TABLE}(booth_number)",
    f"CREATE INDEX IF NOT EXISTS idx_voters_updated ON {VOTERS_TABLE}(updated_at)",
)


def create_voters_schema(conn: sqlite3.Connection) -> None:
    """Create the voters table and its indexes if missing."""
    conn.execute(VOTERS_DDL)
    for ddl in _INDEXES:
        conn.execute(ddl)
    conn.commit()


def batch_insert(conn: sqlite3.Connection, query: str, rows: List[tuple],
                 batch_size: int = 1000) -> int:
    """Execute batch insert operations, committing after each batch.

    Args:
        conn: SQLite connection
        query: SQL INSERT query with ? placeholders
        rows: List of tuples to insert
        batch_size: Number of rows per batch (default: 1000)

    Returns:
        Total number of rows inserted
    """
    total_inserted = 0
    for i in range(0, len(rows), batch_size):
        batch = rows[i:i + batch_size]
        conn.executemany(query, batch)
        conn.commit()
        total_inserted += len(batch)
    return total_inserted


def insert_voters(conn: sqlite3.Connection,
                  records: Iterable[Mapping[str, Any]]) -> int:
    """Insert voter rows given as mappings; missing columns become NULL.

    Returns:
        Number of rows inserted
    """
    placeholders = ",".join("?" * len(VOTER_COLUMNS))
    query = (
        f"INSERT INTO {VOTERS_TABLE} ({', '.join(VOTER_COLUMNS)}) "
        f"VALUES ({placeholders})"
    )
    rows = [tuple(r.get(col) for col in VOTER_COLUMNS) for r in records]
    return batch_insert(conn, query, rows)


def get_table_count(conn: sqlite3.Connection, table: str = VOTERS_TABLE) -> int:
    """Get row count for a table."""
    result = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
    return result[0] if result else 0


def query_to_dicts(conn: sqlite3.Connection, query: str,
                   params: Iterable[Any] = ()) -> List[Dict[str, Any]]:
    """Execute query and return results as list of dicts.

    Args:
        conn: SQLite connection (must have row_factory set)
        query: SQL query string
        params: Query parameters

    Returns:
        List of row dicts
    """
    cursor = conn.execute(query, tuple(params))
    return [dict(row) for row in cursor.fetchall()]
