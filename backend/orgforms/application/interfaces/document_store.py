"""Abstract document store interface (port): implemented in the infrastructure layer."""

from abc import ABC, abstractmethod

from orgforms.domain.entities import Document, Predicate


class DocumentStore(ABC):
    """Port for collection-scoped document persistence.

    Predicate scans return unordered result sets. Implementations raise
    ``UnsupportedQueryError`` for predicates they cannot execute.
    """

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Document | None:
        """Retrieve a single document by id."""
        ...

    @abstractmethod
    async def list_all(self, collection: str) -> list[Document]:
        """Return every document of a collection in the store's default order."""
        ...

    @abstractmethod
    async def query(self, collection: str, predicate: Predicate) -> list[Document]:
        """Return the documents matching one predicate."""
        ...

    @abstractmethod
    async def create(self, document: Document) -> Document:
        """Persist a new document and return it."""
        ...

    @abstractmethod
    async def update(self, document: Document) -> Document:
        """Replace the stored body of an existing document."""
        ...

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> bool:
        """Delete a document. Returns True if deleted, False if not found."""
        ...
