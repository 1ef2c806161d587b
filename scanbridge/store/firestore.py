"""Firestore-backed document store (firebase-admin)."""
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as gexc
from google.cloud.firestore_v1.base_query import FieldFilter

from scanbridge.core.errors import IndexUnavailableError, NotFoundError, StoreError
from scanbridge.core.logging_config import get_logger
from scanbridge.store.base import Document, DocumentStore, WriteBatch

logger = get_logger(__name__)


@contextmanager
def _translate_errors(operation: str, path: str):
    """Re-raise Google API failures as store errors."""
    try:
        yield
    except gexc.FailedPrecondition as exc:
        # Firestore reports a missing composite index as FAILED_PRECONDITION
        raise IndexUnavailableError(f"{operation} on {path} needs an index: {exc.message}") from exc
    except gexc.NotFound as exc:
        raise NotFoundError(f"{operation} on {path}: {exc.message}") from exc
    except (gexc.GoogleAPICallError, gexc.RetryError) as exc:
        logger.error("firestore_call_failed", operation=operation, path=path, error=str(exc))
        raise StoreError(f"{operation} on {path} failed: {exc}") from exc


def initialize_firebase(project_id: Optional[str] = None, credentials_path: Optional[str] = None):
    """
    Initialize the default firebase-admin app once per process.

    A service-account JSON path is used when given; otherwise Application
    Default Credentials, which is what Cloud Run / Cloud Functions provide.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    cred = (
        credentials.Certificate(credentials_path)
        if credentials_path
        else credentials.ApplicationDefault()
    )
    options = {"projectId": project_id} if project_id else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("firebase_initialized", project_id=project_id, service_account=bool(credentials_path))
    return app


class _FirestoreBatch(WriteBatch):
    def __init__(self, client):
        self._client = client
        self._batch = client.batch()
        self._size = 0

    def _ref(self, path, doc_id):
        return self._client.collection(path).document(doc_id)

    def set(self, path, doc_id, data):
        self._batch.set(self._ref(path, doc_id), data)
        self._size += 1

    def update(self, path, doc_id, data):
        self._batch.update(self._ref(path, doc_id), data)
        self._size += 1

    def delete(self, path, doc_id):
        self._batch.delete(self._ref(path, doc_id))
        self._size += 1

    @property
    def size(self) -> int:
        return self._size

    def commit(self) -> None:
        with _translate_errors("batch commit", f"{self._size} writes"):
            self._batch.commit()


class FirestoreStore(DocumentStore):
    """``DocumentStore`` over a ``google.cloud.firestore.Client``."""

    name = "firestore"

    def __init__(self, client=None):
        self._client = client if client is not None else firestore.client()

    @classmethod
    def from_settings(cls, settings) -> "FirestoreStore":
        initialize_firebase(settings.FIREBASE_PROJECT_ID, settings.FIREBASE_CREDENTIALS_PATH)
        return cls()

    def _collection(self, path: str):
        return self._client.collection(path)

    def get(self, path: str, doc_id: str) -> Optional[Document]:
        with _translate_errors("get", path):
            snapshot = self._collection(path).document(doc_id).get()
        if not snapshot.exists:
            return None
        return Document(snapshot.id, snapshot.to_dict() or {})

    def list(self, path: str) -> List[Document]:
        with _translate_errors("list", path):
            return [
                Document(snapshot.id, snapshot.to_dict() or {})
                for snapshot in self._collection(path).stream()
            ]

    def query(self, path, field, value, order_by=None, descending=False, limit=None):
        query = self._collection(path).where(filter=FieldFilter(field, "==", value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        # stream() is lazy; errors surface while iterating
        with _translate_errors("query", path):
            return [Document(snapshot.id, snapshot.to_dict() or {}) for snapshot in query.stream()]

    def add(self, path: str, data: Dict[str, Any]) -> str:
        with _translate_errors("add", path):
            _, ref = self._collection(path).add(data)
        return ref.id

    def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        with _translate_errors("set", path):
            self._collection(path).document(doc_id).set(data)

    def update(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        with _translate_errors("update", path):
            self._collection(path).document(doc_id).update(data)

    def delete(self, path: str, doc_id: str) -> None:
        with _translate_errors("delete", path):
            self._collection(path).document(doc_id).delete()

    def batch(self) -> WriteBatch:
        return _FirestoreBatch(self._client)

    def server_timestamp(self) -> Any:
        return firestore.SERVER_TIMESTAMP
