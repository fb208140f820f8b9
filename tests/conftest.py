from contextlib import contextmanager

import psycopg2
import pytest


class FakeDBManager:
    """In-memory stand-in for DatabaseManager that records every statement."""

    def __init__(self, rows=None, fail_on=None, fail_after=None, ping_error=None):
        self.rows = list(rows or [])
        self.fail_on = fail_on
        self.fail_after = fail_after
        self.ping_error = ping_error
        self.executed = []
        self.commits = 0
        self.connections_opened = 0
        self.connections_released = 0
        self.closed = False

    class _Cursor:
        def __init__(self, outer):
            self.outer = outer
            self._result = []

        def execute(self, query, params=None):
            outer = self.outer
            if outer.fail_on and outer.fail_on in query:
                raise psycopg2.OperationalError(f"failed: {outer.fail_on}")
            if outer.fail_after is not None and len(outer.executed) >= outer.fail_after:
                raise psycopg2.OperationalError("connection lost")
            outer.executed.append((query, params))
            if query.lstrip().upper().startswith("SELECT"):
                self._result = list(outer.rows)

        def fetchone(self):
            return self._result[0] if self._result else None

        def __iter__(self):
            return iter(self._result)

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    class _Conn:
        def __init__(self, outer):
            self.outer = outer
            self.closed = 0

        def cursor(self):
            return FakeDBManager._Cursor(self.outer)

        def commit(self):
            self.outer.commits += 1

        def rollback(self):
            return

    @contextmanager
    def get_connection(self):
        self.connections_opened += 1
        try:
            yield FakeDBManager._Conn(self)
        finally:
            self.connections_released += 1

    def ping(self):
        if self.ping_error is not None:
            raise self.ping_error

    def close(self):
        self.closed = True

    def statements(self, fragment):
        return [(q, p) for q, p in self.executed if fragment in q]


@pytest.fixture
def fake_db():
    return FakeDBManager()


@pytest.fixture
def output():
    return []
