"""Roles, actions and authorization decisions."""

from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    MANAGER = "Manager"
    OPERATOR = "Operator"
    USER = "User"

    @classmethod
    def parse(cls, raw: object) -> "Role | None":
        """Map a role claim to a Role; unknown or missing claims give None."""
        if isinstance(raw, cls):
            return raw
        for role in cls:
            if role.value == raw:
                return role
        return None


class Action(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


class AuditAction(str, Enum):
    """Actions written to the audit log. ``view_list`` has no Action counterpart."""

    VIEW = "view"
    VIEW_LIST = "view_list"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


class Decision(str, Enum):
    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


# Roles that may act on org-owned resources (view/create/edit/delete) by intersection.
ORG_SCOPED_WRITERS = frozenset({Role.MANAGER, Role.OPERATOR})


def denial_for(action: Action) -> Decision:
    """Viewers outside the owning orgs must not learn the resource exists."""
    return Decision.NOT_FOUND if action is Action.VIEW else Decision.FORBIDDEN
