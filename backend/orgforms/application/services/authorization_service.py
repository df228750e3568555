"""Authorization engine: role policy combined with org-set intersection."""

import logging

from orgforms.application.interfaces import ResourceOrgResolver
from orgforms.domain.authorization import ORG_SCOPED_WRITERS, Action, Decision, Role, denial_for
from orgforms.domain.entities import Principal
from orgforms.domain.exceptions import AuthorizationDenied
from orgforms.domain.org_sets import intersects

logger = logging.getLogger(__name__)


class AuthorizationEngine:
    """Decides ALLOW / FORBIDDEN / NOT_FOUND for (principal, action, resolver).

    Policy, in precedence order:

    1. Admin is always allowed; the resolver is never called.
    2. Manager and Operator may view/create/edit/delete where their orgs
       intersect the resource's orgs.
    3. User may only view, under the same intersection rule.
    4. Anything else is forbidden.

    Failed views report NOT_FOUND so existence is not revealed; every other
    failed action reports FORBIDDEN. The engine has no side effects; the
    caller audits after an ALLOW.
    """

    async def authorize(
        self,
        principal: Principal,
        action: Action,
        resolver: ResourceOrgResolver,
    ) -> Decision:
        role = principal.role
        if role is Role.ADMIN:
            return Decision.ALLOW

        if role in ORG_SCOPED_WRITERS:
            return await self._by_intersection(principal, action, resolver)

        if role is Role.USER:
            if action is not Action.VIEW:
                return Decision.FORBIDDEN
            return await self._by_intersection(principal, action, resolver)

        logger.debug("Denying %s for principal %s with role %r", action.value, principal.id, principal.raw_role)
        return Decision.FORBIDDEN

    def authorize_listing(self, principal: Principal) -> Decision:
        """Collection listings: any known role may list; org scoping happens in the query."""
        return Decision.ALLOW if principal.role is not None else Decision.FORBIDDEN

    def authorize_roles(self, principal: Principal, roles: frozenset[Role]) -> Decision:
        return Decision.ALLOW if principal.role in roles else Decision.FORBIDDEN

    async def require(
        self,
        principal: Principal,
        action: Action,
        resolver: ResourceOrgResolver,
    ) -> None:
        """Like :meth:`authorize` but raises AuthorizationDenied on refusal."""
        decision = await self.authorize(principal, action, resolver)
        if decision is not Decision.ALLOW:
            raise AuthorizationDenied(decision)

    async def _by_intersection(
        self,
        principal: Principal,
        action: Action,
        resolver: ResourceOrgResolver,
    ) -> Decision:
        resource_orgs = await resolver.resolve_orgs()
        if intersects(principal.orgs, resource_orgs):
            return Decision.ALLOW
        return denial_for(action)
