"""Student roster lookups used for scan enrichment."""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from scanbridge.core.constants import ENRICHMENT_FIELDS, STUDENTS_COLLECTION
from scanbridge.core.errors import NotFoundError, StoreError
from scanbridge.core.logging_config import get_logger
from scanbridge.core.utils import full_name, parse_number
from scanbridge.store.base import Document, DocumentStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class StudentProfile:
    first_name: str
    last_name: str
    email: str
    doc_id: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Document) -> "StudentProfile":
        return cls(
            first_name=doc.data.get("firstName") or "",
            last_name=doc.data.get("lastName") or "",
            email=doc.data.get("email") or "",
            doc_id=doc.id,
        )

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    def enrichment_fields(self) -> Dict[str, str]:
        """Fields copied onto both scan representations."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "fullName": self.full_name,
        }


def empty_enrichment() -> Dict[str, str]:
    return {name: "" for name in ENRICHMENT_FIELDS}


class StudentDirectory:
    """
    Read-only access to the ``students`` collection.

    Single scans use an indexed lookup per code; bulk jobs load the roster once
    with ``load_roster`` and look codes up in memory.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_by_code(self, code: Any) -> Optional[StudentProfile]:
        """Return the student whose ``studentId`` equals ``code``, or None."""
        if code in (None, ""):
            return None
        matches = self._match(code)
        if not matches:
            logger.info("student_not_found", student_id=code)
            return None
        return StudentProfile.from_document(matches[0])

    def try_find_by_code(self, code: Any) -> Optional[StudentProfile]:
        """Like ``find_by_code`` but a store failure counts as no match."""
        try:
            return self.find_by_code(code)
        except StoreError as exc:
            logger.warning("student_lookup_failed", student_id=code, error=str(exc))
            return None

    def load_roster(self) -> Dict[Any, StudentProfile]:
        """Whole roster keyed by ``studentId`` (as a string); one read for the collection."""
        roster = {}
        for doc in self.store.list(STUDENTS_COLLECTION):
            student_id = doc.data.get("studentId")
            if student_id not in (None, ""):
                roster[str(student_id)] = StudentProfile.from_document(doc)
        logger.info("student_roster_loaded", count=len(roster))
        return roster

    def list_students(self) -> List[Dict[str, Any]]:
        return [doc.to_dict() for doc in self.store.list(STUDENTS_COLLECTION)]

    def get_student(self, student_id: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: no student with that roster id
        """
        matches = self._match(student_id)
        if not matches:
            raise NotFoundError("Student not found")
        return matches[0].to_dict()

    def _match(self, code: Any) -> List[Document]:
        # Roster imports store studentId as a number or a string
        matches = self.store.query(STUDENTS_COLLECTION, "studentId", code, limit=1)
        if not matches and isinstance(code, str):
            number = parse_number(code)
            if number is not None:
                matches = self.store.query(STUDENTS_COLLECTION, "studentId", number, limit=1)
        return matches
