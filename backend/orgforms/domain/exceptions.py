"""Domain-specific exceptions: framework-independent."""

from orgforms.domain.authorization import Decision


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class AuthenticationError(Exception):
    """Raised when a bearer credential is missing or cannot be verified."""

    def __init__(self, message: str = "Invalid token"):
        self.message = message
        super().__init__(message)


class AuthorizationDenied(Exception):
    """Raised when the authorization engine refuses a request.

    The decision is either ``Decision.FORBIDDEN`` or ``Decision.NOT_FOUND``;
    the message never says why access was refused.
    """

    def __init__(self, decision: Decision):
        if decision is Decision.ALLOW:
            raise ValueError("AuthorizationDenied requires a denying decision")
        self.decision = decision
        super().__init__("Not found" if decision is Decision.NOT_FOUND else "Forbidden")


class ValidationFailure(Exception):
    """Raised for malformed input payloads. The message is shown to the caller as-is."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CoercionError(ValidationFailure):
    """Raised when a raw value cannot be shaped into a field type's variant."""

    def __init__(self, field_type: str, raw: object, reason: str | None = None):
        self.field_type = field_type
        self.raw = raw
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot coerce {raw!r} to '{field_type}'{detail}")


class UnsupportedQueryError(Exception):
    """Raised by a document store that cannot execute a predicate."""


class StorageError(Exception):
    """Raised when the document store fails on a primary resource operation."""

    def __init__(self, operation: str, collection: str, cause: Exception | None = None):
        self.operation = operation
        self.collection = collection
        self.cause = cause
        super().__init__(f"Storage failure during {operation} on '{collection}'")
