"""Profile repository. Read-only; profiles are written elsewhere."""

import asyncpg
from typing import Any


class ProfileRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def get_for_user(self, user_id: str) -> dict[str, Any] | None:
        """Return the user's profile, or None if they have none."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM profiles WHERE user_id = $1 LIMIT 1", user_id
            )
        return dict(row) if row else None
