"""TokenVerifier backed by PyJWT."""

import logging
from typing import Any

import jwt

from orgforms.application.interfaces import TokenVerifier
from orgforms.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class JwtTokenVerifier(TokenVerifier):
    """Verifies signed bearer JWTs and returns their claims.

    ``role`` and ``org`` are read from custom claims; the subject is taken
    from ``uid`` or ``sub``.
    """

    def __init__(
        self,
        secret: str,
        algorithms: list[str],
        *,
        audience: str | None = None,
        issuer: str | None = None,
    ):
        self._secret = secret
        self._algorithms = algorithms
        self._audience = audience
        self._issuer = issuer

    async def verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
                options={"verify_aud": self._audience is not None},
            )
        except jwt.PyJWTError as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise AuthenticationError("Invalid token") from exc
