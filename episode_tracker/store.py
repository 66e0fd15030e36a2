"""
Document store abstraction for Cloud Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from episode_tracker.errors import StoreError


@dataclass(frozen=True)
class StoredDocument:
    id: str
    data: Dict[str, Any]


SnapshotCallback = Callable[[List[StoredDocument]], None]


class Subscription(Protocol):
    def unsubscribe(self) -> None:
        ...


class DocumentStore(Protocol):
    """Interface for the remote document database."""

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def set(self, collection: str, doc_id: str, fields: dict) -> None:
        ...

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def subscribe(
        self, collection: str, field: str, value: Any, callback: SnapshotCallback
    ) -> Subscription:
        """
        Opens a live query for documents where `field == value`.

        The callback receives the full matching set once when the query opens
        and again after every change, until the subscription is released.
        """
        ...


@dataclass
class WriteRecord:
    op: str
    collection: str
    doc_id: str
    fields: Optional[dict] = None


@dataclass(eq=False)
class _InMemorySubscription:
    store: "InMemoryDocumentStore"
    collection: str
    field: str
    value: Any
    callback: SnapshotCallback
    active: bool = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self.store.subscriptions.remove(self)


class InMemoryDocumentStore:
    """
    Simple in-memory document store for development and tests.

    Snapshot callbacks are delivered synchronously after every write to the
    subscribed collection.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {}
        self.subscriptions: List[_InMemorySubscription] = []
        self.writes: List[WriteRecord] = []
        self.fail_writes = False
        self.fail_reads = False

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.collections.clear()
        self.subscriptions.clear()
        self.writes.clear()
        self.fail_writes = False
        self.fail_reads = False

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        if self.fail_reads:
            raise StoreError(f"Read of {collection}/{doc_id} failed")
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def set(self, collection: str, doc_id: str, fields: dict) -> None:
        self._record("set", collection, doc_id, fields)
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(fields)
        self._notify(collection)

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        self._record("update", collection, doc_id, fields)
        docs = self.collections.get(collection, {})
        if doc_id not in docs:
            raise StoreError(f"No document to update: {collection}/{doc_id}")
        docs[doc_id].update(copy.deepcopy(fields))
        self._notify(collection)

    def delete(self, collection: str, doc_id: str) -> None:
        self._record("delete", collection, doc_id)
        self.collections.get(collection, {}).pop(doc_id, None)
        self._notify(collection)

    def subscribe(
        self, collection: str, field: str, value: Any, callback: SnapshotCallback
    ) -> _InMemorySubscription:
        subscription = _InMemorySubscription(
            store=self,
            collection=collection,
            field=field,
            value=value,
            callback=callback,
        )
        self.subscriptions.append(subscription)
        callback(self._matching(subscription))
        return subscription

    def _record(
        self, op: str, collection: str, doc_id: str, fields: dict | None = None
    ) -> None:
        self.writes.append(WriteRecord(op, collection, doc_id, copy.deepcopy(fields)))
        if self.fail_writes:
            raise StoreError(f"Write ({op}) to {collection}/{doc_id} failed")

    def _matching(self, subscription: _InMemorySubscription) -> List[StoredDocument]:
        docs = self.collections.get(subscription.collection, {})
        return [
            StoredDocument(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in docs.items()
            if data.get(subscription.field) == subscription.value
        ]

    def _notify(self, collection: str) -> None:
        for subscription in list(self.subscriptions):
            if subscription.active and subscription.collection == collection:
                subscription.callback(self._matching(subscription))


class FirestoreDocumentStore:
    """
    Cloud Firestore implementation backed by a `google.cloud.firestore.Client`.
    """

    def __init__(self, client):
        self._db = client

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        try:
            snapshot = self._db.collection(collection).document(doc_id).get()
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Failed to read {collection}/{doc_id}: {e}") from e
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def set(self, collection: str, doc_id: str, fields: dict) -> None:
        try:
            self._db.collection(collection).document(doc_id).set(fields)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Failed to write {collection}/{doc_id}: {e}") from e

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        try:
            self._db.collection(collection).document(doc_id).update(fields)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Failed to update {collection}/{doc_id}: {e}") from e

    def delete(self, collection: str, doc_id: str) -> None:
        try:
            self._db.collection(collection).document(doc_id).delete()
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Failed to delete {collection}/{doc_id}: {e}") from e

    def subscribe(
        self, collection: str, field: str, value: Any, callback: SnapshotCallback
    ) -> Subscription:
        def on_snapshot(doc_snapshots, changes, read_time):
            callback(
                [
                    StoredDocument(id=snapshot.id, data=snapshot.to_dict() or {})
                    for snapshot in doc_snapshots
                ]
            )

        query = self._db.collection(collection).where(
            filter=FieldFilter(field, "==", value)
        )
        try:
            return query.on_snapshot(on_snapshot)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreError(f"Failed to subscribe to {collection}: {e}") from e
