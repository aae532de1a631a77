"""Shared test fixtures for the profile API test suite."""

import asyncio
import pytest
from datetime import UTC, datetime
from quart import Quart

from storage import database


# ── Database Pool Mock ──


class FakeRecord(dict):
    """Mimics asyncpg.Record: supports both dict-style and attribute access."""
    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key)


class FakeConnection:
    """Mock asyncpg connection with configurable return values."""

    def __init__(self):
        self.execute_results: list[str] = ["INSERT 0 1"]
        self.execute_error: Exception | None = None
        self.fetchrow_results: list[dict | None] = []
        self.fetchrow_result: dict | None = None
        self._execute_calls: list[tuple] = []
        self._fetchrow_calls: list[tuple] = []

    async def execute(self, query, *args):
        self._execute_calls.append((query, args))
        if self.execute_error is not None:
            raise self.execute_error
        return self.execute_results.pop(0) if self.execute_results else "INSERT 0 0"

    async def fetchrow(self, query, *args):
        self._fetchrow_calls.append((query, args))
        result = self.fetchrow_results.pop(0) if self.fetchrow_results else self.fetchrow_result
        return FakeRecord(result) if result else None


class FakePool:
    """Mock asyncpg.Pool that yields a FakeConnection."""

    def __init__(self):
        self.conn = FakeConnection()
        self.acquired = 0
        self.released = 0

    def acquire(self):
        return FakePoolContext(self)


class FakePoolContext:
    def __init__(self, pool):
        self.pool = pool

    async def __aenter__(self):
        self.pool.acquired += 1
        return self.pool.conn

    async def __aexit__(self, *args):
        self.pool.released += 1


@pytest.fixture
def fake_pool():
    """Provide a mock database pool."""
    return FakePool()


@pytest.fixture
def fake_conn(fake_pool):
    """Direct access to the underlying FakeConnection."""
    return fake_pool.conn


# ── In-memory store ──


class MemoryConnection:
    """Interprets the handful of statements this service issues.

    Every call yields to the event loop first so concurrent callers interleave
    the way separate database round trips would.
    """

    def __init__(self, store: "MemoryStore"):
        self.store = store

    async def execute(self, query, *args):
        await asyncio.sleep(0)
        q = " ".join(query.split())
        if q.startswith("CREATE TABLE IF NOT EXISTS"):
            self.store.ddl_runs += 1
            return "CREATE TABLE"
        if q.startswith("INSERT INTO users"):
            self.store.insert_attempts += 1
            user_id = args[0]
            if user_id in self.store.users:
                return "INSERT 0 0"
            self.store.users[user_id] = {
                "id": user_id,
                "token": None,
                "email": None,
                "created_at": datetime.now(UTC),
            }
            return "INSERT 0 1"
        raise AssertionError(f"unexpected statement: {q}")

    async def fetchrow(self, query, *args):
        await asyncio.sleep(0)
        q = " ".join(query.split())
        if q.startswith("SELECT * FROM users WHERE id"):
            row = self.store.users.get(args[0])
        elif q.startswith("SELECT * FROM users WHERE token"):
            row = next((u for u in self.store.users.values() if u["token"] == args[0]), None)
        elif q.startswith("SELECT * FROM profiles WHERE user_id"):
            row = self.store.profiles.get(args[0])
        else:
            raise AssertionError(f"unexpected query: {q}")
        return FakeRecord(row) if row else None


class MemoryStore:
    def __init__(self):
        self.users: dict[str, dict] = {}
        self.profiles: dict[str, dict] = {}
        self.ddl_runs = 0
        self.insert_attempts = 0

    def add_user(self, user_id, token=None, email=None, created_at=None):
        self.users[user_id] = {
            "id": user_id,
            "token": token,
            "email": email,
            "created_at": created_at or datetime(2024, 1, 1, tzinfo=UTC),
        }
        return self.users[user_id]

    def add_profile(self, user_id, **fields):
        row = {
            "user_id": user_id,
            "profile_type": None,
            "display_name": None,
            "bio": None,
            "metadata": None,
            "updated_at": datetime(2024, 1, 2, tzinfo=UTC),
        }
        row.update(fields)
        self.profiles[user_id] = row
        return row


class MemoryPool:
    def __init__(self, store: MemoryStore):
        self.store = store

    def acquire(self):
        return MemoryPoolContext(MemoryConnection(self.store))


class MemoryPoolContext:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *args):
        pass


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def memory_pool(memory_store):
    return MemoryPool(memory_store)


# ── Module state ──


@pytest.fixture
def reset_pool(monkeypatch):
    """Give storage.database a clean pool slot and lock for the test."""
    monkeypatch.setattr(database, "_pool", None)
    monkeypatch.setattr(database, "_pool_lock", asyncio.Lock())


# ── App ──


@pytest.fixture
def app(monkeypatch, memory_pool) -> Quart:
    """Quart app whose profile route talks to the in-memory store."""
    from web.app import create_app
    from web.routes import profile as profile_routes

    async def _get_pool():
        return memory_pool

    monkeypatch.setattr(profile_routes, "get_pool", _get_pool)
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()
