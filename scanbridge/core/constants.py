"""Application constants.

Collection names, field names and defaults shared by the store layer and the
services. Centralizing them keeps the two scan representations in step.
"""

# Collections
EVENTS_COLLECTION = "events"
STUDENTS_COLLECTION = "students"
SCANS_COLLECTION = "scans"  # flat representation
LISTS_COLLECTION = "lists"  # parent of the nested representation
NESTED_SCANS_SUBCOLLECTION = "scans"
ERRORS_COLLECTION = "errors"
RECONCILIATION_COLLECTION = "reconciliation"

# The flat copy is queried on listId; eventId mirrors it for newer clients
FLAT_EVENT_FIELD = "listId"

# Scan defaults
DEFAULT_SYMBOLOGY = "QR_CODE"

# Event defaults
DEFAULT_EXPORT_FORMAT = "TEXT_DELIMITED"
DEFAULT_CREATED_BY = "mobile_app"

# Maintenance-only deletion target
TEST_EVENT_ID = "1756647674290"

# Fields copied from a matched student onto both scan representations
ENRICHMENT_FIELDS = ("firstName", "lastName", "email", "fullName")


def nested_scans_path(event_id: str) -> str:
    """Collection path of the nested scan log for an event."""
    return f"{LISTS_COLLECTION}/{event_id}/{NESTED_SCANS_SUBCOLLECTION}"
