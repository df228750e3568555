"""Fixtures for API and SQL store tests against a temporary SQLite database."""

from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from orgforms.application.interfaces import TokenVerifier
from orgforms.domain.exceptions import AuthenticationError
from orgforms.infrastructure.database import Base, build_session_factory
from orgforms.infrastructure.database.repositories import (
    SQLAlchemyAuditLogRepository,
    SQLAlchemyDocumentStore,
)
from orgforms.infrastructure.dependencies import get_session_factory, get_token_verifier
from orgforms.main import app

TOKENS: dict[str, dict[str, Any]] = {
    "admin-token": {"uid": "admin-1", "email": "admin@example.com", "role": "Admin"},
    "manager-token": {"uid": "mgr-1", "email": "mgr@example.com", "role": "Manager", "org": ["A", "B"]},
    "manager-c-token": {"uid": "mgr-2", "email": "mgr2@example.com", "role": "Manager", "org": "C"},
    "operator-token": {"uid": "op-1", "email": "op@example.com", "role": "Operator", "org": ["A"]},
    "user-token": {"uid": "user-1", "email": "user@example.com", "role": "User", "org": "A"},
}


class FakeTokenVerifier(TokenVerifier):
    async def verify(self, token: str) -> dict[str, Any]:
        if token not in TOKENS:
            raise AuthenticationError("Invalid token")
        return TOKENS[token]


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orgforms-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def document_store(session_factory) -> SQLAlchemyDocumentStore:
    return SQLAlchemyDocumentStore(session_factory, array_contains_any_limit=3)


@pytest.fixture
def audit_log_repository(session_factory) -> SQLAlchemyAuditLogRepository:
    return SQLAlchemyAuditLogRepository(session_factory)


@pytest_asyncio.fixture
async def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_token_verifier] = FakeTokenVerifier
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()
