"""
Database Connector for AdventureWorks BI
Handles all SQLite connections and query execution
Thread-safe: one read-only connection per thread
"""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from adventureworks_bi import config
from adventureworks_bi.exceptions import QueryExecutionError, SnapshotError

logger = logging.getLogger(__name__)

QueryParams = Optional[Union[Dict[str, Any], tuple]]


class DatabaseConnector:
    """Manages thread-safe, read-only access to the AdventureWorks snapshot"""

    def __init__(self, db_path: Union[str, Path] = None):
        """
        Initialize database connector

        Args:
            db_path: Path to SQLite database file, defaults to config.DATABASE_PATH
        """
        if db_path is None:
            db_path = config.DATABASE_PATH

        self.db_path = Path(db_path)

        if not self.db_path.exists():
            raise SnapshotError(f"Database not found: {self.db_path}")

        # Thread-local storage for connections
        self._local = threading.local()

    def connect(self) -> sqlite3.Connection:
        """
        Establish a read-only connection for the current thread
        Each thread gets its own connection
        """
        if getattr(self._local, "connection", None) is None:
            uri = self.db_path.resolve().as_uri() + "?mode=ro"
            self._local.connection = sqlite3.connect(uri, uri=True, check_same_thread=False)
            logger.debug("Opened read-only connection to %s", self.db_path)

        return self._local.connection

    def execute_query(self, query: str, params: QueryParams = None) -> pd.DataFrame:
        """
        Execute SQL query and return results as DataFrame

        Args:
            query: SQL query string
            params: Optional named (dict) or positional (tuple) parameters

        Returns:
            pd.DataFrame: Query results
        """
        conn = self.connect()

        try:
            if params:
                return pd.read_sql_query(query, conn, params=params)
            return pd.read_sql_query(query, conn)
        except (sqlite3.Error, pd.errors.DatabaseError) as e:
            raise QueryExecutionError(f"Query execution failed: {e}", query) from e

    def get_table_list(self) -> List[str]:
        """Get list of all tables in database"""
        query = "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        result = self.execute_query(query)
        return result["name"].tolist()

    def get_row_count(self, table_name: str) -> int:
        """Get total row count for a table"""
        if table_name not in self.get_table_list():
            raise SnapshotError(f"Unknown table: {table_name}")
        result = self.execute_query(f'SELECT COUNT(*) AS count FROM "{table_name}"')
        return int(result["count"].iloc[0])

    def get_distinct_years(self, table_name: str, date_column: str = "ModifiedDate") -> List[int]:
        """Calendar years present in a table's date column, newest first"""
        if table_name not in self.get_table_list():
            raise SnapshotError(f"Unknown table: {table_name}")
        query = f"""
        SELECT DISTINCT CAST(STRFTIME('%Y', "{date_column}") AS INTEGER) AS yr
        FROM "{table_name}"
        WHERE "{date_column}" IS NOT NULL
        ORDER BY yr DESC
        """
        result = self.execute_query(query)
        return [int(y) for y in result["yr"].dropna()]

    def close(self):
        """Close thread-specific database connection"""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def get_db_connection(db_path: Union[str, Path] = None) -> DatabaseConnector:
    """
    Get a new database connector instance
    Do not cache this in Streamlit - create fresh each time
    """
    return DatabaseConnector(db_path)
