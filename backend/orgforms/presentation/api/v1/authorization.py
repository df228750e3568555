"""Request principal resolution and domain-error → HTTP translation."""

from fastapi import Depends, Header, HTTPException, status

from orgforms.application.services import PrincipalResolver
from orgforms.domain.authorization import Decision
from orgforms.domain.entities import Principal
from orgforms.domain.exceptions import (
    AuthenticationError,
    AuthorizationDenied,
    EntityNotFoundError,
    ValidationFailure,
)
from orgforms.infrastructure.dependencies import get_principal_resolver

# Exceptions an endpoint turns into a 4xx response.
DOMAIN_ERRORS = (AuthorizationDenied, EntityNotFoundError, ValidationFailure)


async def get_current_principal(
    authorization: str | None = Header(default=None),
    resolver: PrincipalResolver = Depends(get_principal_resolver),
) -> Principal:
    """FastAPI dependency: the verified caller, or 401."""
    try:
        return await resolver.resolve(authorization)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, AuthorizationDenied):
        if exc.decision is Decision.NOT_FOUND:
            return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationFailure):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    raise TypeError(f"No HTTP mapping for {type(exc).__name__}") from exc
