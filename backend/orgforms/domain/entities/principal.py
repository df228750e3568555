"""Domain entity: the verified caller of a request."""

from dataclasses import dataclass, field
from typing import Any

from orgforms.domain.authorization import Role
from orgforms.domain.org_sets import normalize_org_set


@dataclass(frozen=True)
class Principal:
    """Built per request from verified token claims; never persisted.

    ``role`` is None when the claim is missing or not a known role;
    ``raw_role`` keeps the claim as received for auditing.
    """

    id: str
    email: str | None = None
    role: Role | None = None
    orgs: frozenset[str] = field(default_factory=frozenset)
    raw_role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "Principal":
        raw_role = claims.get("role")
        return cls(
            id=str(claims.get("uid") or claims.get("sub") or claims.get("user_id") or ""),
            email=claims.get("email"),
            role=Role.parse(raw_role),
            orgs=normalize_org_set(claims.get("org")),
            raw_role=raw_role if isinstance(raw_role, str) else None,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role.value if self.role else self.raw_role,
            "orgs": sorted(self.orgs),
        }
