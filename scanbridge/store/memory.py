"""In-memory document store used by the test-suite and local development."""
import copy
import threading
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from scanbridge.core.errors import IndexUnavailableError, NotFoundError
from scanbridge.store.base import Document, DocumentStore, WriteBatch

Collections = Dict[str, "OrderedDict[str, Dict[str, Any]]"]


def _order_key(value: Any) -> Tuple[int, Any]:
    """Cross-type ordering close to Firestore's: null < bool < number < timestamp < string."""
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, datetime):
        return (3, value.timestamp())
    if isinstance(value, str):
        return (4, value)
    return (5, repr(value))


class _MemoryBatch(WriteBatch):
    def __init__(self, store: "InMemoryStore"):
        self._store = store
        self._ops: List[Tuple[str, str, str, Optional[Dict[str, Any]]]] = []

    def set(self, path, doc_id, data):
        self._ops.append(("set", path, doc_id, copy.deepcopy(data)))

    def update(self, path, doc_id, data):
        self._ops.append(("update", path, doc_id, copy.deepcopy(data)))

    def delete(self, path, doc_id):
        self._ops.append(("delete", path, doc_id, None))

    @property
    def size(self) -> int:
        return len(self._ops)

    def commit(self) -> None:
        self._store._apply_atomically(self._ops)
        self._ops = []


class InMemoryStore(DocumentStore):
    """
    Dictionary-backed ``DocumentStore``.

    Args:
        ordered_queries: when False, every ordered query raises
            ``IndexUnavailableError`` the way Firestore does without a
            composite index.
    """

    name = "memory"

    def __init__(self, ordered_queries: bool = True):
        self.ordered_queries = ordered_queries
        self._collections: Collections = {}
        self._lock = threading.RLock()

    # Helpers for tests and seeding

    def seed(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.set(path, doc_id, data)

    def dump(self, path: str) -> Dict[str, Dict[str, Any]]:
        """Snapshot of a collection as ``{doc_id: data}``."""
        with self._lock:
            return copy.deepcopy(dict(self._collections.get(path, {})))

    # DocumentStore

    def get(self, path: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            data = self._collections.get(path, {}).get(doc_id)
            if data is None:
                return None
            return Document(doc_id, copy.deepcopy(data))

    def list(self, path: str) -> List[Document]:
        with self._lock:
            return [
                Document(doc_id, copy.deepcopy(data))
                for doc_id, data in self._collections.get(path, {}).items()
            ]

    def query(self, path, field, value, order_by=None, descending=False, limit=None):
        if order_by and not self.ordered_queries:
            raise IndexUnavailableError(
                f"The query requires an index on {path}: {field} ==, {order_by} order"
            )
        with self._lock:
            matches = [
                Document(doc_id, copy.deepcopy(data))
                for doc_id, data in self._collections.get(path, {}).items()
                if field in data and data[field] == value
                and not (isinstance(data[field], bool) != isinstance(value, bool))
            ]
        if order_by:
            # Documents without the ordering field are excluded, as in Firestore
            matches = [doc for doc in matches if order_by in doc.data]
            matches.sort(key=lambda doc: _order_key(doc.data[order_by]), reverse=descending)
        if limit is not None:
            matches = matches[:limit]
        return matches

    def add(self, path: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.set(path, doc_id, data)
        return doc_id

    def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            self._collections.setdefault(path, OrderedDict())[doc_id] = copy.deepcopy(data)

    def update(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            existing = self._collections.get(path, {}).get(doc_id)
            if existing is None:
                raise NotFoundError(f"No document to update: {path}/{doc_id}")
            existing.update(copy.deepcopy(data))

    def delete(self, path: str, doc_id: str) -> None:
        with self._lock:
            self._collections.get(path, {}).pop(doc_id, None)

    def batch(self) -> WriteBatch:
        return _MemoryBatch(self)

    def server_timestamp(self) -> datetime:
        return datetime.now(timezone.utc)

    def _apply_atomically(self, ops) -> None:
        with self._lock:
            staged = copy.deepcopy(self._collections)
            for op, path, doc_id, data in ops:
                collection = staged.setdefault(path, OrderedDict())
                if op == "set":
                    collection[doc_id] = data
                elif op == "update":
                    if doc_id not in collection:
                        raise NotFoundError(f"No document to update: {path}/{doc_id}")
                    collection[doc_id].update(data)
                else:
                    collection.pop(doc_id, None)
            self._collections = staged
