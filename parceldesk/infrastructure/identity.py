"""Bearer-token verification: turns a signed JWT into a principal e-mail."""

from __future__ import annotations

import logging

from jose import JWTError, jwt

from parceldesk.config import settings
from parceldesk.domain.errors import UnauthenticatedError

logger = logging.getLogger(__name__)


class TokenVerifier:
    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def verify(self, token: str) -> str:
        """Return the lower-cased ``email`` claim of a valid token."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.warning("Token verification failed: %s", exc)
            raise UnauthenticatedError("Invalid or expired token") from exc

        email = payload.get("email")
        if not email:
            raise UnauthenticatedError("Token has no email claim")
        return str(email).strip().lower()
