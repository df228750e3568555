"""Unit tests for the AuthorizationEngine."""

import pytest

from orgforms.application.interfaces import ResourceOrgResolver
from orgforms.application.services import AuthorizationEngine
from orgforms.domain.authorization import Action, Decision, Role
from orgforms.domain.entities import Principal
from orgforms.domain.exceptions import AuthorizationDenied


# ── Fakes ────────────────────────────────────────────────────────────


class FakeResolver(ResourceOrgResolver):
    def __init__(self, orgs):
        self._orgs = frozenset(orgs)
        self.calls = 0

    async def resolve_orgs(self) -> frozenset[str]:
        self.calls += 1
        return self._orgs


class ExplodingResolver(ResourceOrgResolver):
    async def resolve_orgs(self) -> frozenset[str]:
        raise AssertionError("resolver must not be called")


def _principal(role: Role | None, *orgs: str, raw_role: str | None = None) -> Principal:
    return Principal(id="u1", role=role, orgs=frozenset(orgs), raw_role=raw_role)


@pytest.fixture
def engine() -> AuthorizationEngine:
    return AuthorizationEngine()


# ── Tests ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize("action", list(Action))
async def test_admin_is_allowed_without_resolving(engine, action):
    decision = await engine.authorize(_principal(Role.ADMIN), action, ExplodingResolver())
    assert decision is Decision.ALLOW


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [Role.MANAGER, Role.OPERATOR])
@pytest.mark.parametrize("action", list(Action))
async def test_org_writers_allowed_on_intersection(engine, role, action):
    decision = await engine.authorize(_principal(role, "A", "B"), action, FakeResolver({"B", "Z"}))
    assert decision is Decision.ALLOW


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [Role.MANAGER, Role.OPERATOR])
async def test_failed_view_reports_not_found(engine, role):
    decision = await engine.authorize(_principal(role, "A"), Action.VIEW, FakeResolver({"Z"}))
    assert decision is Decision.NOT_FOUND


@pytest.mark.asyncio
@pytest.mark.parametrize("action", [Action.CREATE, Action.EDIT, Action.DELETE])
async def test_failed_mutation_reports_forbidden(engine, action):
    decision = await engine.authorize(_principal(Role.OPERATOR, "A"), action, FakeResolver({"Z"}))
    assert decision is Decision.FORBIDDEN


@pytest.mark.asyncio
async def test_user_may_view_within_org(engine):
    resolver = FakeResolver({"A"})
    assert await engine.authorize(_principal(Role.USER, "A"), Action.VIEW, resolver) is Decision.ALLOW
    assert resolver.calls == 1


@pytest.mark.asyncio
async def test_user_view_outside_org_is_not_found(engine):
    decision = await engine.authorize(_principal(Role.USER, "A"), Action.VIEW, FakeResolver({"Z"}))
    assert decision is Decision.NOT_FOUND


@pytest.mark.asyncio
@pytest.mark.parametrize("action", [Action.CREATE, Action.EDIT, Action.DELETE])
async def test_user_mutations_forbidden_without_resolving(engine, action):
    decision = await engine.authorize(_principal(Role.USER, "A"), action, ExplodingResolver())
    assert decision is Decision.FORBIDDEN


@pytest.mark.asyncio
async def test_unknown_role_is_forbidden(engine):
    decision = await engine.authorize(_principal(None, "A", raw_role="Guest"), Action.VIEW, FakeResolver({"A"}))
    assert decision is Decision.FORBIDDEN


@pytest.mark.asyncio
async def test_empty_principal_orgs_never_intersect(engine):
    decision = await engine.authorize(_principal(Role.MANAGER), Action.EDIT, FakeResolver(set()))
    assert decision is Decision.FORBIDDEN


@pytest.mark.asyncio
async def test_require_raises_with_decision(engine):
    with pytest.raises(AuthorizationDenied) as excinfo:
        await engine.require(_principal(Role.USER, "A"), Action.VIEW, FakeResolver({"Z"}))
    assert excinfo.value.decision is Decision.NOT_FOUND
    assert str(excinfo.value) == "Not found"


def test_listing_requires_a_known_role(engine):
    assert engine.authorize_listing(_principal(Role.USER)) is Decision.ALLOW
    assert engine.authorize_listing(_principal(None)) is Decision.FORBIDDEN


def test_authorization_denied_rejects_allow():
    with pytest.raises(ValueError):
        AuthorizationDenied(Decision.ALLOW)
