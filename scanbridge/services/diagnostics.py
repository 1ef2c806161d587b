"""Client-reported error log."""
from typing import Any, Dict

from scanbridge.core.constants import ERRORS_COLLECTION
from scanbridge.core.logging_config import get_logger
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)


def record_error(store: DocumentStore, payload: Dict[str, Any]) -> str:
    """Store an error payload sent by a scanner, stamped with server time."""
    error_id = store.add(ERRORS_COLLECTION, {**payload, "timestamp": store.server_timestamp()})
    logger.info("client_error_recorded", error_id=error_id, keys=sorted(payload))
    return error_id
