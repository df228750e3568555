"""Unit tests for bearer-token principal resolution."""

from typing import Any

import jwt
import pytest

from orgforms.application.interfaces import TokenVerifier
from orgforms.application.services import PrincipalResolver
from orgforms.domain.authorization import Role
from orgforms.domain.exceptions import AuthenticationError
from orgforms.infrastructure.auth.jwt_token_verifier import JwtTokenVerifier

SECRET = "unit-test-secret-of-at-least-32-bytes"


class FakeTokenVerifier(TokenVerifier):
    def __init__(self, claims: dict[str, Any]):
        self._claims = claims
        self.tokens: list[str] = []

    async def verify(self, token: str) -> dict[str, Any]:
        self.tokens.append(token)
        return self._claims


@pytest.mark.asyncio
async def test_missing_header_is_rejected():
    resolver = PrincipalResolver(FakeTokenVerifier({}))
    with pytest.raises(AuthenticationError, match="No token provided"):
        await resolver.resolve(None)


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Basic abc", "Bearer ", "token-without-scheme"])
async def test_malformed_header_is_rejected(header):
    resolver = PrincipalResolver(FakeTokenVerifier({"uid": "u1"}))
    with pytest.raises(AuthenticationError, match="Invalid token"):
        await resolver.resolve(header)


@pytest.mark.asyncio
async def test_claims_become_principal():
    verifier = FakeTokenVerifier({"uid": "u1", "email": "a@b.c", "role": "Operator", "org": ["A", None, ""]})
    principal = await PrincipalResolver(verifier).resolve("Bearer tok123")
    assert verifier.tokens == ["tok123"]
    assert principal.id == "u1"
    assert principal.role is Role.OPERATOR
    assert principal.orgs == frozenset({"A"})


@pytest.mark.asyncio
async def test_scalar_org_claim_and_unknown_role():
    principal = await PrincipalResolver(FakeTokenVerifier({"sub": "u2", "role": "Root", "org": "B"})).resolve(
        "Bearer t"
    )
    assert principal.role is None
    assert principal.raw_role == "Root"
    assert principal.orgs == frozenset({"B"})


@pytest.mark.asyncio
async def test_claims_without_subject_are_rejected():
    with pytest.raises(AuthenticationError):
        await PrincipalResolver(FakeTokenVerifier({"role": "Admin"})).resolve("Bearer t")


# ── PyJWT verifier ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_jwt_verifier_accepts_signed_tokens():
    token = jwt.encode({"uid": "u1", "role": "Admin"}, SECRET, algorithm="HS256")
    claims = await JwtTokenVerifier(SECRET, ["HS256"]).verify(token)
    assert claims["uid"] == "u1"


@pytest.mark.asyncio
async def test_jwt_verifier_rejects_bad_signature():
    token = jwt.encode({"uid": "u1"}, "another-secret-that-is-also-long-enough", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        await JwtTokenVerifier(SECRET, ["HS256"]).verify(token)


@pytest.mark.asyncio
async def test_jwt_verifier_checks_audience_when_configured():
    token = jwt.encode({"uid": "u1", "aud": "someone-else"}, SECRET, algorithm="HS256")
    with pytest.raises(AuthenticationError):
        await JwtTokenVerifier(SECRET, ["HS256"], audience="orgforms").verify(token)
