"""
Database Mock for Component Testing

Mocks AsyncPostgresClient for testing without real database connections.
"""
from typing import Any, Dict, List, Optional


class MockAsyncPostgresClient:
    """Mock for AsyncPostgresClient (asyncpg pool wrapper)"""

    def __init__(self):
        self.queries: List[tuple] = []
        self.connected = False
        self._row_responses: List[Optional[Dict[str, Any]]] = []
        self._row_response: Optional[Dict[str, Any]] = None
        self._rows_response: List[Dict[str, Any]] = []
        self._healthy = True
        self._should_raise: Optional[Exception] = None

    async def connect(self):
        self.connected = True

    async def close(self):
        self.connected = False

    async def health_check(self) -> bool:
        if self._should_raise:
            raise self._should_raise
        return self._healthy

    async def query_row(self, query: str, params: List[Any] = None) -> Optional[Dict[str, Any]]:
        """Mock single row query; queued responses are returned first"""
        self.queries.append(("query_row", query, params or []))

        if self._should_raise:
            raise self._should_raise

        if self._row_responses:
            return self._row_responses.pop(0)
        return self._row_response

    async def query(self, query: str, params: List[Any] = None) -> List[Dict[str, Any]]:
        """Mock multi-row query"""
        self.queries.append(("query", query, params or []))

        if self._should_raise:
            raise self._should_raise

        return self._rows_response

    # Test helper methods

    def set_row_response(self, row: Optional[Dict[str, Any]]):
        """Set the default response for query_row calls"""
        self._row_response = row

    def queue_row_responses(self, *rows: Optional[Dict[str, Any]]):
        """Queue responses for consecutive query_row calls"""
        self._row_responses.extend(rows)

    def set_rows_response(self, rows: List[Dict[str, Any]]):
        """Set the response for query calls"""
        self._rows_response = rows

    def set_healthy(self, healthy: bool):
        self._healthy = healthy

    def set_error(self, error: Exception):
        """Set an error to be raised on next call"""
        self._should_raise = error

    def get_queries(self, method: Optional[str] = None) -> List[tuple]:
        """Get recorded queries, optionally filtered by method"""
        if method:
            return [q for q in self.queries if q[0] == method]
        return self.queries

    def get_last_query(self) -> Optional[tuple]:
        """Get the last recorded query"""
        return self.queries[-1] if self.queries else None

    def assert_query_executed(self, pattern: str, method: Optional[str] = None):
        """Assert that a query matching pattern was executed"""
        queries = self.get_queries(method)
        for q in queries:
            if pattern.lower() in q[1].lower():
                return True
        raise AssertionError(f"No query matching '{pattern}' was executed. Queries: {queries}")
