"""Cluster REST API adapter."""

from __future__ import annotations

from .mapper import DEFAULT_MAPPINGS, ResourceMapper, ResourceMapping
from .schema import ObjectListPayload, ObjectMetaPayload, ObjectPayload, StatusPayload
from .store import KubeObjectStore, format_label_selector, raise_for_status, to_stored_object

__all__ = [
    "DEFAULT_MAPPINGS",
    "KubeObjectStore",
    "ObjectListPayload",
    "ObjectMetaPayload",
    "ObjectPayload",
    "ResourceMapper",
    "ResourceMapping",
    "StatusPayload",
    "format_label_selector",
    "raise_for_status",
    "to_stored_object",
]
