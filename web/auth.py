"""Header-based caller resolution: dev-mode user id or bearer token.

Dev mode (``x-user-id``) trusts the caller and provisions unseen ids. It is
for testing, not a security boundary.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from config.constants import (
    AUTHORIZATION_HEADER,
    BEARER_PREFIX,
    DEV_USER_HEADER,
    INVALID_AUTH_MESSAGE,
    MISSING_AUTH_MESSAGE,
)
from storage.repositories.user_repo import UserRepository

log = structlog.get_logger(__name__)


class AuthError(Exception):
    """Client-facing authentication failure (HTTP 401)."""

    message = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class MissingCredentials(AuthError):
    message = MISSING_AUTH_MESSAGE


class InvalidCredentials(AuthError):
    message = INVALID_AUTH_MESSAGE


def extract_bearer_token(header: str | None) -> str | None:
    """Return the token after a case-sensitive ``Bearer `` prefix, else None."""
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):] or None


async def resolve_user(headers: Mapping[str, str], users: UserRepository) -> dict[str, Any]:
    """Map request headers to a user row, provisioning dev-mode ids.

    Raises MissingCredentials when no usable header is present and
    InvalidCredentials when a bearer token matches nobody.
    """
    dev_user_id = headers.get(DEV_USER_HEADER) or None
    bearer = extract_bearer_token(headers.get(AUTHORIZATION_HEADER))

    if dev_user_id:
        user = await users.get_by_id(dev_user_id)
        if user is None:
            created = await users.create_if_missing(dev_user_id)
            log.info("dev_user_provisioned", user_id=dev_user_id, created=created)
            user = await users.get_by_id(dev_user_id)
    elif bearer:
        user = await users.get_by_token(bearer)
    else:
        raise MissingCredentials()

    if user is None:
        log.info("auth_rejected", mode="dev" if dev_user_id else "bearer")
        raise InvalidCredentials()
    return user
