from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from clusterapply.adapters.sqlalchemy import SqlAlchemyObjectStore, create_all_tables
from clusterapply.domain.inventory import ClusterInventoryClient, InventoryInfo  # noqa: TC001
from tests.support.stores import InMemoryObjectStore, make_info

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def info() -> InventoryInfo:
    return make_info()


@pytest.fixture
def inventory_client(memory_store: InMemoryObjectStore) -> ClusterInventoryClient:
    return ClusterInventoryClient(memory_store)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: Engine) -> SqlAlchemyObjectStore:
    return SqlAlchemyObjectStore(sqlite_engine)
