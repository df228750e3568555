"""Resolves the request principal from a bearer credential."""

import logging

from orgforms.application.interfaces import TokenVerifier
from orgforms.domain.entities import Principal
from orgforms.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class PrincipalResolver:
    """Turns an ``Authorization`` header into a Principal via the identity service."""

    def __init__(self, verifier: TokenVerifier):
        self._verifier = verifier

    async def resolve(self, authorization: str | None) -> Principal:
        if not authorization:
            raise AuthenticationError("No token provided")

        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Invalid token")

        claims = await self._verifier.verify(token.strip())
        principal = Principal.from_claims(claims)
        if not principal.id:
            logger.warning("Verified token carries no subject claim")
            raise AuthenticationError("Invalid token")
        return principal
