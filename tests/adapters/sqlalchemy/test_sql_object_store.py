from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from pathlib import Path  # noqa: TC003

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine  # noqa: TC002

from clusterapply.adapters.sqlalchemy import (
    SqlAlchemyObjectStore,
    create_object_store,
    stored_object_label_table,
)
from clusterapply.domain.errors import ObjectAlreadyExistsError, ObjectNotFoundError
from clusterapply.domain.inventory import CONFIG_MAP, DEFAULT_INVENTORY_LABEL
from clusterapply.domain.model import StoredObject
from clusterapply.domain.ports import RemoteStore
from tests.support.stores import SERVICE, make_anchor


def test_store_satisfies_port(sql_store: SqlAlchemyObjectStore) -> None:
    assert isinstance(sql_store, RemoteStore)


def test_create_assigns_identity_and_version(sql_store: SqlAlchemyObjectStore) -> None:
    created = sql_store.create(make_anchor("inventory-obj"))

    assert created.uid is not None
    assert created.resource_version == "1"
    assert created.created_at is not None
    assert created.created_at.utcoffset() == timedelta(0)


def test_find_matches_all_selector_labels(sql_store: SqlAlchemyObjectStore) -> None:
    sql_store.create(make_anchor("inv-a", inventory_id="a"))
    sql_store.create(make_anchor("inv-b", inventory_id="b"))
    sql_store.create(make_anchor("inv-other-ns", inventory_id="a", namespace="other"))

    found = sql_store.find(CONFIG_MAP, "test", {DEFAULT_INVENTORY_LABEL: "a"})

    assert [obj.name for obj in found] == ["inv-a"]
    assert found[0].labels == {DEFAULT_INVENTORY_LABEL: "a"}


def test_find_filters_on_group_kind(sql_store: SqlAlchemyObjectStore) -> None:
    sql_store.create(StoredObject(group_kind=SERVICE, namespace="test", name="inv-a"))

    assert sql_store.find(CONFIG_MAP, "test", {}) == []
    assert [obj.name for obj in sql_store.find(SERVICE, "test", {})] == ["inv-a"]


def test_find_orders_by_namespace_and_name(sql_store: SqlAlchemyObjectStore) -> None:
    for name in ("c", "a", "b"):
        sql_store.create(make_anchor(name))

    found = sql_store.find(CONFIG_MAP, "test", {DEFAULT_INVENTORY_LABEL: "inv-1234"})

    assert [obj.name for obj in found] == ["a", "b", "c"]


def test_create_duplicate_raises_already_exists(sql_store: SqlAlchemyObjectStore) -> None:
    sql_store.create(make_anchor("inventory-obj"))

    with pytest.raises(ObjectAlreadyExistsError) as exc:
        sql_store.create(make_anchor("inventory-obj"))

    assert exc.value.status_code == 409


def test_replace_rewrites_data_and_bumps_version(sql_store: SqlAlchemyObjectStore) -> None:
    created = sql_store.create(make_anchor("inventory-obj"))

    replaced = sql_store.replace(created.with_data({"test_a_apps_Deployment": ""}))

    assert replaced.uid == created.uid
    assert replaced.resource_version == "2"
    (stored,) = sql_store.find(CONFIG_MAP, "test", {})
    assert stored.data == {"test_a_apps_Deployment": ""}
    assert stored.resource_version == "2"


def test_annotations_survive_create_and_replace(sql_store: SqlAlchemyObjectStore) -> None:
    anchor = replace(make_anchor("inventory-obj"), annotations={"owner": "platform"})

    created = sql_store.create(anchor)
    sql_store.replace(created.with_data({"test_a_apps_Deployment": ""}))

    (stored,) = sql_store.find(CONFIG_MAP, "test", {})
    assert stored.annotations == {"owner": "platform"}


def test_replace_missing_raises_not_found(sql_store: SqlAlchemyObjectStore) -> None:
    with pytest.raises(ObjectNotFoundError):
        sql_store.replace(make_anchor("inventory-obj"))


def test_delete_removes_object_and_labels(
    sql_store: SqlAlchemyObjectStore, sqlite_engine: Engine
) -> None:
    sql_store.create(make_anchor("inventory-obj"))

    sql_store.delete(make_anchor("inventory-obj"))

    assert sql_store.find(CONFIG_MAP, "test", {}) == []
    with sqlite_engine.connect() as connection:
        labels = connection.execute(
            select(func.count()).select_from(stored_object_label_table)
        ).scalar_one()
    assert labels == 0


def test_delete_missing_raises_not_found(sql_store: SqlAlchemyObjectStore) -> None:
    with pytest.raises(ObjectNotFoundError):
        sql_store.delete(make_anchor("inventory-obj"))


def test_create_object_store_initialises_schema(tmp_path: Path) -> None:
    store = create_object_store(f"sqlite+pysqlite:///{tmp_path / 'objects.db'}")

    store.create(make_anchor("inventory-obj"))

    assert len(store.find(CONFIG_MAP, "test", {})) == 1
    store.engine.dispose()
