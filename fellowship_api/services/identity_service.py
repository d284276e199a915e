# Identity Service
"""
Resolve a bearer credential to the calling user's id.

User tokens are HS256 JWTs issued by the fellowship app's auth provider and
signed with the shared project secret; the ``sub`` claim holds the user id.
"""

import logging
from typing import Optional
from uuid import UUID

import jwt

from fellowship_api.config import Settings
from fellowship_api.errors import AuthError

logger = logging.getLogger("fellowship.services.identity")


class IdentityService:
    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.audience = settings.jwt_audience

    def resolve_caller(self, token: Optional[str]) -> UUID:
        """
        Validate a JWT and return its subject.

        Raises:
            AuthError: Token missing, expired, badly signed or without a user id
        """
        if not token:
            raise AuthError("Missing Authorization Bearer token")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise AuthError("Unauthorized")

        subject = payload.get("sub")
        try:
            return UUID(str(subject))
        except (TypeError, ValueError):
            raise AuthError("Token payload missing user ID")
