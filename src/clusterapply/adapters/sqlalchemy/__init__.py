"""SQLAlchemy adapter package for clusterapply."""

from __future__ import annotations

from .store import SqlAlchemyObjectStore, create_object_store
from .tables import (
    create_all_tables,
    metadata,
    stored_object_label_table,
    stored_object_table,
)

__all__ = [
    "SqlAlchemyObjectStore",
    "create_all_tables",
    "create_object_store",
    "metadata",
    "stored_object_label_table",
    "stored_object_table",
]
