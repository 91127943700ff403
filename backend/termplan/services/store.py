from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from threading import Lock

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from termplan.core.exceptions import ResourceNotFoundError, StoreError
from termplan.models.document import StoredDocument

logger = logging.getLogger(__name__)

Snapshot = list[dict]
Listener = Callable[[Snapshot], None]


class DocumentStore(ABC):
    """Named collections of department-scoped JSON records."""

    @abstractmethod
    def subscribe(self, collection: str, on_change: Listener) -> Callable[[], None]:
        """Register ``on_change`` and return a callable that removes it."""

    @abstractmethod
    def add(self, collection: str, record: dict) -> str: ...

    @abstractmethod
    def update(self, collection: str, record_id: str, partial: dict) -> dict: ...

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None: ...

    @abstractmethod
    def batch_add(self, collection: str, records: list[dict]) -> list[str]: ...

    @abstractmethod
    def get(self, collection: str, record_id: str) -> dict | None: ...

    @abstractmethod
    def list(self, collection: str, department_id: str | None = None) -> Snapshot: ...


class SubscriptionRegistry:
    """Process-wide listeners, shared by every store bound to a short-lived session."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._lock = Lock()

    def add(self, collection: str, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners[collection].append(listener)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(collection, [])
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    def listeners(self, collection: str) -> list[Listener]:
        with self._lock:
            return list(self._listeners.get(collection, []))

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()


subscriptions = SubscriptionRegistry()


class SqlDocumentStore(DocumentStore):
    def __init__(self, db: Session, registry: SubscriptionRegistry | None = None) -> None:
        self.db = db
        self.registry = registry or subscriptions

    def subscribe(self, collection: str, on_change: Listener) -> Callable[[], None]:
        return self.registry.add(collection, on_change)

    def add(self, collection: str, record: dict) -> str:
        record_id = self._stage(collection, record, self._next_sequence(collection))
        self._commit(collection)
        return record_id

    def batch_add(self, collection: str, records: list[dict]) -> list[str]:
        if not records:
            return []
        sequence = self._next_sequence(collection)
        ids = [self._stage(collection, record, sequence + offset) for offset, record in enumerate(records)]
        self._commit(collection)
        return ids

    def update(self, collection: str, record_id: str, partial: dict) -> dict:
        document = self.db.get(StoredDocument, (collection, record_id))
        if document is None:
            raise ResourceNotFoundError(collection, record_id)
        merged = {**document.data, **partial, "id": record_id}
        document.data = merged
        if "departmentId" in partial:
            document.department_id = partial["departmentId"]
        self._commit(collection)
        return merged

    def delete(self, collection: str, record_id: str) -> None:
        document = self.db.get(StoredDocument, (collection, record_id))
        if document is None:
            raise ResourceNotFoundError(collection, record_id)
        self.db.delete(document)
        self._commit(collection)

    def get(self, collection: str, record_id: str) -> dict | None:
        document = self.db.get(StoredDocument, (collection, record_id))
        return dict(document.data) if document is not None else None

    def list(self, collection: str, department_id: str | None = None) -> Snapshot:
        query = select(StoredDocument).where(StoredDocument.collection == collection)
        if department_id is not None:
            query = query.where(StoredDocument.department_id == department_id)
        query = query.order_by(StoredDocument.sequence)
        return [dict(document.data) for document in self.db.execute(query).scalars()]

    def _next_sequence(self, collection: str) -> int:
        current = self.db.execute(
            select(func.max(StoredDocument.sequence)).where(StoredDocument.collection == collection)
        ).scalar_one_or_none()
        return (current or 0) + 1

    def _stage(self, collection: str, record: dict, sequence: int) -> str:
        record_id = record.get("id") or str(uuid.uuid4())
        data = {**record, "id": record_id}
        document = self.db.get(StoredDocument, (collection, record_id))
        if document is None:
            document = StoredDocument(collection=collection, id=record_id, sequence=sequence)
            self.db.add(document)
        document.data = data
        document.department_id = data.get("departmentId")
        return record_id

    def _commit(self, collection: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Document store write to %s failed", collection)
            raise StoreError(f"Unable to write to {collection}", details={"collection": collection}) from exc
        self._notify(collection)

    def _notify(self, collection: str) -> None:
        listeners = self.registry.listeners(collection)
        if not listeners:
            return
        snapshot = self.list(collection)
        logger.debug("Publishing %d %s record(s) to %d listener(s)", len(snapshot), collection, len(listeners))
        for listener in listeners:
            listener(snapshot)


class SessionScopedStore(DocumentStore):
    """Opens a short-lived session per call, for holders that outlive a request."""

    def __init__(self, session_factory: Callable[[], Session], registry: SubscriptionRegistry | None = None) -> None:
        self.session_factory = session_factory
        self.registry = registry or subscriptions

    def _call(self, method: str, *args):
        with self.session_factory() as db:
            return getattr(SqlDocumentStore(db, self.registry), method)(*args)

    def subscribe(self, collection: str, on_change: Listener) -> Callable[[], None]:
        return self.registry.add(collection, on_change)

    def add(self, collection: str, record: dict) -> str:
        return self._call("add", collection, record)

    def update(self, collection: str, record_id: str, partial: dict) -> dict:
        return self._call("update", collection, record_id, partial)

    def delete(self, collection: str, record_id: str) -> None:
        self._call("delete", collection, record_id)

    def batch_add(self, collection: str, records: list[dict]) -> list[str]:
        return self._call("batch_add", collection, records)

    def get(self, collection: str, record_id: str) -> dict | None:
        return self._call("get", collection, record_id)

    def list(self, collection: str, department_id: str | None = None) -> Snapshot:
        return self._call("list", collection, department_id)
