"""Shared utilities for the voter status API and dashboard."""

# Configuration
from utils.config import AppConfig, Config

# Database utilities
from utils.database import (
    VOTER_COLUMNS,
    VOTERS_TABLE,
    create_voters_schema,
    get_table_count,
    insert_voters,
)

# HTTP utilities
from utils.http import RetryStrategy, SessionManager, get_json

# SQL query building
from utils.query import build_order_clause, build_where_clause

__all__ = [
    "AppConfig",
    "Config",
    "VOTER_COLUMNS",
    "VOTERS_TABLE",
    "create_voters_schema",
    "get_table_count",
    "insert_voters",
    "RetryStrategy",
    "SessionManager",
    "get_json",
    "build_order_clause",
    "build_where_clause",
]
