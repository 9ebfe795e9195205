"""Remote store implementation backed by a SQL database."""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, delete, exists, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from clusterapply.domain.errors import ObjectAlreadyExistsError, ObjectNotFoundError
from clusterapply.domain.model import GroupKind, StoredObject

from .tables import create_all_tables, stored_object_label_table, stored_object_table

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy.engine import Engine, RowMapping

log = getLogger(__name__)

_objects = stored_object_table
_labels = stored_object_label_table


class SqlAlchemyObjectStore:
    """:class:`RemoteStore` keeping objects and their labels in two tables.

    Label queries are exact matches, one ``EXISTS`` per selector pair. Every
    write runs in its own transaction.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory: sessionmaker[Session] = sessionmaker(
            bind=engine, expire_on_commit=False
        )

    def find(
        self,
        group_kind: GroupKind,
        namespace: str,
        label_selector: Mapping[str, str],
    ) -> list[StoredObject]:
        stmt = select(_objects).where(
            _objects.c.api_group == group_kind.group,
            _objects.c.kind == group_kind.kind,
            _objects.c.namespace == namespace,
        )
        for key, value in label_selector.items():
            stmt = stmt.where(
                exists().where(
                    _labels.c.object_id == _objects.c.id,
                    _labels.c.key == key,
                    _labels.c.value == value,
                )
            )
        stmt = stmt.order_by(_objects.c.namespace, _objects.c.name)

        with self.session_factory() as session:
            rows = session.execute(stmt).mappings().all()
            labels = self._labels_by_object(session, [row["id"] for row in rows])
        return [_to_stored_object(row, labels[row["id"]]) for row in rows]

    def create(self, obj: StoredObject) -> StoredObject:
        object_id = uuid.uuid4()
        created_at = datetime.now(tz=UTC)
        try:
            with self.session_factory.begin() as session:
                if self._find_id(session, obj) is not None:
                    raise _already_exists(obj)
                session.execute(
                    insert(_objects).values(
                        id=object_id,
                        api_group=obj.group_kind.group,
                        kind=obj.group_kind.kind,
                        namespace=obj.namespace,
                        name=obj.name,
                        resource_version=1,
                        created_at=created_at,
                        annotations=dict(obj.annotations),
                        data=dict(obj.data),
                    )
                )
                self._write_labels(session, object_id, obj.labels)
        except IntegrityError as exc:
            raise _already_exists(obj) from exc
        log.debug("created %s %s/%s", obj.group_kind, obj.namespace, obj.name)
        return StoredObject(
            group_kind=obj.group_kind,
            namespace=obj.namespace,
            name=obj.name,
            labels=obj.labels,
            annotations=obj.annotations,
            data=obj.data,
            uid=str(object_id),
            resource_version="1",
            created_at=created_at,
        )

    def replace(self, obj: StoredObject) -> StoredObject:
        with self.session_factory.begin() as session:
            row = self._get_row(session, obj)
            version = int(row["resource_version"]) + 1
            session.execute(
                update(_objects)
                .where(_objects.c.id == row["id"])
                .values(
                    data=dict(obj.data),
                    annotations=dict(obj.annotations),
                    resource_version=version,
                )
            )
            session.execute(delete(_labels).where(_labels.c.object_id == row["id"]))
            self._write_labels(session, row["id"], obj.labels)
        log.debug("replaced %s %s/%s", obj.group_kind, obj.namespace, obj.name)
        return StoredObject(
            group_kind=obj.group_kind,
            namespace=obj.namespace,
            name=obj.name,
            labels=obj.labels,
            annotations=obj.annotations,
            data=obj.data,
            uid=str(row["id"]),
            resource_version=str(version),
            created_at=row["created_at"],
        )

    def delete(self, obj: StoredObject) -> None:
        with self.session_factory.begin() as session:
            row = self._get_row(session, obj)
            session.execute(delete(_labels).where(_labels.c.object_id == row["id"]))
            session.execute(delete(_objects).where(_objects.c.id == row["id"]))
        log.debug("deleted %s %s/%s", obj.group_kind, obj.namespace, obj.name)

    def _identity_clause(self, obj: StoredObject) -> tuple[Any, ...]:
        return (
            _objects.c.api_group == obj.group_kind.group,
            _objects.c.kind == obj.group_kind.kind,
            _objects.c.namespace == obj.namespace,
            _objects.c.name == obj.name,
        )

    def _find_id(self, session: Session, obj: StoredObject) -> uuid.UUID | None:
        stmt = select(_objects.c.id).where(*self._identity_clause(obj))
        return session.execute(stmt).scalar_one_or_none()

    def _get_row(self, session: Session, obj: StoredObject) -> RowMapping:
        stmt = select(_objects).where(*self._identity_clause(obj))
        row = session.execute(stmt).mappings().one_or_none()
        if row is None:
            raise ObjectNotFoundError(
                f"{obj.group_kind} {obj.namespace}/{obj.name} not found",
                status_code=404,
                reason="NotFound",
            )
        return row

    def _write_labels(
        self, session: Session, object_id: uuid.UUID, labels: Mapping[str, str]
    ) -> None:
        if not labels:
            return
        session.execute(
            insert(_labels),
            [{"object_id": object_id, "key": key, "value": value} for key, value in labels.items()],
        )

    def _labels_by_object(
        self, session: Session, object_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, dict[str, str]]:
        labels: dict[uuid.UUID, dict[str, str]] = defaultdict(dict)
        ids = list(object_ids)
        if not ids:
            return labels
        stmt = select(_labels).where(_labels.c.object_id.in_(ids))
        for row in session.execute(stmt).mappings():
            labels[row["object_id"]][row["key"]] = row["value"]
        return labels


def _already_exists(obj: StoredObject) -> ObjectAlreadyExistsError:
    return ObjectAlreadyExistsError(
        f"{obj.group_kind} {obj.namespace}/{obj.name} already exists",
        status_code=409,
        reason="AlreadyExists",
    )


def _to_stored_object(row: RowMapping, labels: Mapping[str, str]) -> StoredObject:
    return StoredObject(
        group_kind=GroupKind(group=row["api_group"], kind=row["kind"]),
        namespace=row["namespace"],
        name=row["name"],
        labels=labels,
        annotations=row["annotations"] or {},
        data=row["data"] or {},
        uid=str(row["id"]),
        resource_version=str(row["resource_version"]),
        created_at=row["created_at"],
    )


def create_object_store(database_uri: str) -> SqlAlchemyObjectStore:
    """Open (and if needed initialise) a SQL object store at ``database_uri``."""

    engine = create_engine(database_uri, future=True)
    create_all_tables(engine)
    return SqlAlchemyObjectStore(engine)
