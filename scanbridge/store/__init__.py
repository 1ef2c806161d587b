"""Document store adapters."""
from scanbridge.store.base import Document, DocumentStore, WriteBatch
from scanbridge.store.memory import InMemoryStore

__all__ = ["Document", "DocumentStore", "WriteBatch", "InMemoryStore"]
