"""Invite token issuer."""

import secrets

import logfire

from roster.domain.error import ConflictError
from roster.domain.repository import InviteRepository
from roster.domain.value import InviteToken

from .base import Service

# 32 random bytes -> 43 URL-safe characters
DEFAULT_TOKEN_BYTES = 32
MAX_DRAWS = 5


class TokenService(Service):
    """Produces unguessable, unique invite tokens."""

    def __init__(
        self, invite_repository: InviteRepository, token_bytes: int = DEFAULT_TOKEN_BYTES
    ) -> None:
        """Initialize token service.

        Args:
            invite_repository: Invite repository, used to reject collisions
            token_bytes: Entropy per token in bytes
        """
        self.invite_repository = invite_repository
        self.token_bytes = token_bytes

    async def issue(self) -> InviteToken:
        """Draw a fresh token that no stored invite carries.

        Returns:
            New invite token

        Raises:
            ConflictError: If every draw collided (practically impossible)
        """
        for draw in range(1, MAX_DRAWS + 1):
            token = InviteToken(secrets.token_urlsafe(self.token_bytes))
            if not await self.invite_repository.token_exists(token):
                return token
            logfire.warn("Invite token collision", draw=draw)
        raise ConflictError("Failed to generate a unique invite token")
