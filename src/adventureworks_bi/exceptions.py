"""Errors raised by the snapshot loader and the query layer."""


class AnalyticsError(Exception):
    """Base class for all AdventureWorks BI errors"""


class SnapshotError(AnalyticsError):
    """The snapshot (CSV directory or SQLite file) is missing or malformed"""


class QueryExecutionError(AnalyticsError):
    """A query failed inside the engine"""

    def __init__(self, message: str, query: str = None):
        super().__init__(message)
        self.query = query

    def __str__(self):
        base = super().__str__()
        if self.query:
            return f"{base}\nQuery: {self.query.strip()}"
        return base
