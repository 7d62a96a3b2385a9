"""JWT token utilities.

Access tokens are issued by the identity provider; the API only verifies
them and reads the subject (the identity id).
"""

from datetime import datetime

import jwt
from pydantic import BaseModel

from roster.config import AuthSettings


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str  # Identity id, equal to the profile id
    exp: datetime
    email: str | None = None


class JWTError(Exception):
    """JWT-related error."""

    pass


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
