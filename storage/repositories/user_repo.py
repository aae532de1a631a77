"""User repository."""

import asyncpg
from typing import Any


class UserRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def get_by_id(self, user_id: str) -> dict[str, Any] | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM users WHERE id = $1 LIMIT 1", user_id
            )
        return dict(row) if row else None

    async def get_by_token(self, token: str) -> dict[str, Any] | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM users WHERE token = $1 LIMIT 1", token
            )
        return dict(row) if row else None

    async def create_if_missing(self, user_id: str) -> bool:
        """Insert a bare user row; a concurrent insert of the same id is a no-op.

        Returns True if this call created the row.
        """
        async with self._pool.acquire() as conn:
            status = await conn.execute(
                "INSERT INTO users (id, created_at) VALUES ($1, now()) ON CONFLICT DO NOTHING",
                user_id,
            )
        return status == "INSERT 0 1"
