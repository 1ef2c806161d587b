"""Document store interface.

Collections are addressed by slash-separated paths (``"scans"``,
``"lists/E1/scans"``) so nested sub-collections need no extra API.
Adapters translate their backend's failures into ``StoreError`` subclasses
from ``scanbridge.core.errors``.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Document:
    """A stored document: its id plus its field data."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to the wire shape ``{"id": ..., **fields}``."""
        return {"id": self.id, **self.data}


class WriteBatch(ABC):
    """Writes staged together and applied all-or-nothing on ``commit``."""

    @abstractmethod
    def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def update(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def delete(self, path: str, doc_id: str) -> None:
        ...

    @abstractmethod
    def commit(self) -> None:
        ...

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of staged writes."""


class DocumentStore(ABC):
    """CRUD, equality queries and atomic batches over named collections."""

    name = "abstract"

    @abstractmethod
    def get(self, path: str, doc_id: str) -> Optional[Document]:
        """Return the document or None when it does not exist."""

    @abstractmethod
    def list(self, path: str) -> List[Document]:
        """Return every document in a collection."""

    @abstractmethod
    def query(
        self,
        path: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """
        Return documents where ``field == value``.

        Raises:
            IndexUnavailableError: if ``order_by`` needs an index that is missing
        """

    @abstractmethod
    def add(self, path: str, data: Dict[str, Any]) -> str:
        """Create a document with a store-assigned id and return the id."""

    @abstractmethod
    def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Create or fully overwrite a document."""

    @abstractmethod
    def update(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        """
        Merge fields into an existing document.

        Raises:
            NotFoundError: if the document does not exist
        """

    @abstractmethod
    def delete(self, path: str, doc_id: str) -> None:
        """Delete a document; deleting a missing document is a no-op."""

    @abstractmethod
    def batch(self) -> WriteBatch:
        ...

    @abstractmethod
    def server_timestamp(self) -> Any:
        """Value that the store replaces with its own clock on write."""
