"""Remote store backed by a Kubernetes-style REST API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from clusterapply.adapters.http_resilience import RateLimit, ResilienceConfig, ResilientClient
from clusterapply.domain.errors import (
    ObjectAlreadyExistsError,
    ObjectNotFoundError,
    StoreAPIError,
)
from clusterapply.domain.model import StoredObject

from .mapper import ResourceMapper, ResourceMapping
from .schema import ObjectListPayload, ObjectPayload, StatusPayload

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    import httpx

    from clusterapply.config.cluster import ClusterConfig
    from clusterapply.domain.model import GroupKind

log = getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 30.0


def _default_resilience_config(cluster: ClusterConfig) -> ResilienceConfig:
    return ResilienceConfig(
        name="cluster",
        base_url=cluster.server,
        timeout_seconds=_DEFAULT_TIMEOUT_SECONDS,
        verify_tls=cluster.verify_tls,
        ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        default_headers=cluster.auth_headers(),
    )


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def format_label_selector(selector: Mapping[str, str]) -> str:
    return ",".join(f"{key}={value}" for key, value in sorted(selector.items()))


def to_stored_object(payload: ObjectPayload, group_kind: GroupKind) -> StoredObject:
    meta = payload.metadata
    return StoredObject(
        group_kind=group_kind,
        namespace=meta.namespace,
        name=meta.name,
        labels=meta.labels,
        annotations=meta.annotations,
        data=payload.data,
        uid=meta.uid,
        resource_version=meta.resource_version,
        created_at=meta.creation_timestamp,
    )


def to_request_body(
    obj: StoredObject, mapping: ResourceMapping, namespace: str | None = None
) -> dict[str, object]:
    """Serialise ``obj`` for create/replace.

    ``namespace`` overrides ``obj.namespace`` once the store has resolved the
    default. ``resourceVersion`` is left out so a replace overwrites whatever
    the cluster holds.
    """

    namespace = obj.namespace if namespace is None else namespace
    metadata: dict[str, object] = {"name": obj.name, "labels": dict(obj.labels)}
    if obj.annotations:
        metadata["annotations"] = dict(obj.annotations)
    if mapping.namespaced and namespace:
        metadata["namespace"] = namespace
    return {
        "apiVersion": mapping.api_version,
        "kind": obj.group_kind.kind,
        "metadata": metadata,
        "data": dict(obj.data),
    }


def raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return

    status = StatusPayload()
    try:
        status = StatusPayload.model_validate(response.json())
    except (ValueError, ValidationError):
        log.debug("non-JSON error body from %s", response.request.url)
    message = status.message or f"{response.status_code} {response.reason_phrase}"

    if response.status_code == 404:  # noqa: PLR2004
        raise ObjectNotFoundError(message, status_code=404, reason=status.reason or "NotFound")
    if response.status_code == 409 and status.reason == "AlreadyExists":  # noqa: PLR2004
        raise ObjectAlreadyExistsError(message, status_code=409, reason=status.reason)
    log.error(f"Cluster API error {response.status_code}: {message}")
    raise StoreAPIError(message, status_code=response.status_code, reason=status.reason)


@dataclass(slots=True)
class KubeObjectStore:
    """Blocking :class:`RemoteStore` over the cluster REST API.

    Each call opens one resilient async client and runs to completion on a
    private event loop, so the store can be used from worker threads. Retries
    and rate limiting live in the client configuration.
    """

    cluster: ClusterConfig
    mapper: ResourceMapper = field(default_factory=ResourceMapper)
    resilience: ResilienceConfig | None = None
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __post_init__(self) -> None:
        if self.resilience is None:
            self.resilience = _default_resilience_config(self.cluster)

    def find(
        self,
        group_kind: GroupKind,
        namespace: str,
        label_selector: Mapping[str, str],
    ) -> list[StoredObject]:
        mapping = self.mapper.mapping_for(group_kind)
        path = mapping.collection_path(self._namespace_for(mapping, namespace))
        params = {"labelSelector": format_label_selector(label_selector)}

        async def call(client: ResilientClient) -> list[StoredObject]:
            response = await client.get(path, params=params)
            raise_for_status(response)
            listing = ObjectListPayload.model_validate(response.json())
            return [to_stored_object(item, group_kind) for item in listing.items]

        log.debug("GET %s?labelSelector=%s", path, params["labelSelector"])
        return self._run(call)

    def create(self, obj: StoredObject) -> StoredObject:
        mapping = self.mapper.mapping_for(obj.group_kind)
        namespace = self._namespace_for(mapping, obj.namespace)
        path = mapping.collection_path(namespace)
        body = to_request_body(obj, mapping, namespace)

        async def call(client: ResilientClient) -> StoredObject:
            response = await client.post(path, json=body)
            raise_for_status(response)
            return to_stored_object(ObjectPayload.model_validate(response.json()), obj.group_kind)

        log.debug("POST %s (%s)", path, obj.name)
        return self._run(call)

    def replace(self, obj: StoredObject) -> StoredObject:
        mapping = self.mapper.mapping_for(obj.group_kind)
        namespace = self._namespace_for(mapping, obj.namespace)
        path = mapping.object_path(namespace, obj.name)
        body = to_request_body(obj, mapping, namespace)

        async def call(client: ResilientClient) -> StoredObject:
            response = await client.put(path, json=body)
            raise_for_status(response)
            return to_stored_object(ObjectPayload.model_validate(response.json()), obj.group_kind)

        log.debug("PUT %s", path)
        return self._run(call)

    def delete(self, obj: StoredObject) -> None:
        mapping = self.mapper.mapping_for(obj.group_kind)
        path = mapping.object_path(self._namespace_for(mapping, obj.namespace), obj.name)

        async def call(client: ResilientClient) -> None:
            response = await client.delete(path)
            raise_for_status(response)

        log.debug("DELETE %s", path)
        self._run(call)

    def _namespace_for(self, mapping: ResourceMapping, namespace: str) -> str:
        """Namespaced kinds with no namespace go to the cluster default."""
        if mapping.namespaced and not namespace:
            return self.cluster.default_namespace
        return namespace

    def _run[T](self, call: Callable[[ResilientClient], Awaitable[T]]) -> T:
        resilience = self.resilience or _default_resilience_config(self.cluster)

        async def with_client() -> T:
            async with self.client_factory(resilience) as client:
                return await call(client)

        return asyncio.run(with_client())
