"""Strategy interface: which organizations own the resource a request targets."""

from abc import ABC, abstractmethod


class ResourceOrgResolver(ABC):
    """Single-method capability injected per route.

    For reads and mutations it yields the stored document's ``org``; for
    creation, the requester's own orgs.
    """

    @abstractmethod
    async def resolve_orgs(self) -> frozenset[str]:
        ...
