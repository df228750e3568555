"""Abstract interface for the external identity service."""

from abc import ABC, abstractmethod
from typing import Any


class TokenVerifier(ABC):
    """Turns an opaque bearer credential into verified claims.

    Claims carry ``uid`` (or ``sub``), ``email``, ``role`` and ``org``.
    Implementations raise ``AuthenticationError`` for anything they cannot verify.
    """

    @abstractmethod
    async def verify(self, token: str) -> dict[str, Any]:
        ...
