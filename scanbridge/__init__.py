"""scanbridge: check-in scan ingestion and event/student lookups."""

__version__ = "1.0.0"
