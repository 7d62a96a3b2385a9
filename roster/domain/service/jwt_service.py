"""JWT token domain service."""

from uuid import UUID

import logfire

from roster.config import AuthSettings
from roster.domain.value import ProfileId
from roster.util.jwt import JWTError, TokenPayload, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for verifying access tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("JWT token verified", subject=payload.sub)
                return payload
            except JWTError as e:
                logfire.error("JWT token verification failed", error=str(e))
                raise

    def get_profile_id(self, token: str) -> ProfileId:
        """Verify a token and return the caller's profile id.

        Raises:
            JWTError: If the token is invalid or its subject is not a UUID
        """
        payload = self.verify_token(token)
        try:
            return ProfileId(UUID(payload.sub))
        except ValueError:
            raise JWTError("Invalid token subject")
