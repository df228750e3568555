"""Use cases for the current principal and stored user profiles.

Credentials and identity claims are minted by the identity provider; this
service only keeps the ``users`` profile documents, keyed by the provider's
subject id.
"""

from typing import Any

from orgforms.application.services.resource_service import ResourceService
from orgforms.domain.authorization import Decision, Role
from orgforms.domain.entities import Document, Principal
from orgforms.domain.exceptions import AuthorizationDenied, ValidationFailure

USERS = "users"

USER_READERS = frozenset({Role.ADMIN, Role.MANAGER})
USER_DELETERS = frozenset({Role.ADMIN})


class UserProfileService(ResourceService):
    collection = USERS
    entity_name = "User profile"
    accepts_client_id = True

    def me(self, principal: Principal) -> dict[str, Any]:
        return principal.to_payload()

    async def list_profiles(self, principal: Principal) -> list[dict[str, Any]]:
        """Admin sees every profile; Manager only profiles sharing one of its orgs."""
        self._require_role(principal, USER_READERS)
        documents = await self.list_visible(principal)
        return [d.to_payload() for d in documents]

    async def register(self, principal: Principal, body: dict[str, Any]) -> Document:
        """Store a profile. Managers register into their own orgs and never as Admin."""
        self._require_role(principal, USER_READERS)
        role = Role.parse(body.get("role"))
        if role is None:
            raise ValidationFailure(f"Unknown role {body.get('role')!r}")
        if role is Role.ADMIN and not principal.is_admin:
            raise AuthorizationDenied(Decision.FORBIDDEN)

        profile_id = body.get("id")
        if profile_id and await self._store.get(USERS, str(profile_id)) is not None:
            raise ValidationFailure(f"User profile {profile_id} already exists")
        return await self.create(principal, {**body, "role": role.value})

    async def delete_profile(self, principal: Principal, profile_id: str) -> None:
        self._require_role(principal, USER_DELETERS)
        await self.delete(principal, profile_id)

    def _require_role(self, principal: Principal, roles: frozenset[Role]) -> None:
        decision = self._authz.authorize_roles(principal, roles)
        if decision is not Decision.ALLOW:
            raise AuthorizationDenied(decision)
