"""Pydantic models describing the cluster API object payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_empty(value: object) -> object:
    if value is None:
        return {}
    return value


def _none_to_list(value: object) -> object:
    if value is None:
        return []
    return value


class KubeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMetaPayload(KubeBaseModel):
    name: str
    namespace: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    uid: str | None = None
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    creation_timestamp: datetime | None = Field(default=None, alias="creationTimestamp")

    _normalize_labels = field_validator("labels", "annotations", mode="before")(_none_to_empty)


class ObjectPayload(KubeBaseModel):
    # List items usually omit apiVersion and kind.
    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: ObjectMetaPayload
    data: dict[str, str] = Field(default_factory=dict)

    _normalize_data = field_validator("data", mode="before")(_none_to_empty)


class ListMetaPayload(KubeBaseModel):
    resource_version: str | None = Field(default=None, alias="resourceVersion")


class ObjectListPayload(KubeBaseModel):
    metadata: ListMetaPayload = Field(default_factory=ListMetaPayload)
    items: list[ObjectPayload] = Field(default_factory=list)

    _normalize_items = field_validator("items", mode="before")(_none_to_list)


class StatusPayload(KubeBaseModel):
    """Error body returned alongside non-2xx responses."""

    status: str | None = None
    message: str | None = None
    reason: str | None = None
    code: int | None = None
