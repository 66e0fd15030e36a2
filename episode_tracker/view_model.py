"""
Session and show-list view-model.

Bridges the store's push-based data into an immutable `SessionState` that
callers observe through listeners. State changes only when the profile fetch
completes or the show-list live query pushes a new result set; mutation
operations never write it.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from dacite import DaciteError

from episode_tracker.auth import AuthClient
from episode_tracker.errors import StoreError
from episode_tracker.store import DocumentStore, StoredDocument, Subscription
from shared.convert import show_from_document, user_from_document
from shared.firebase_constants import (
    SHOW_OWNER_FIELD,
    SHOWS_COLLECTION,
    USERS_COLLECTION,
)
from shared.types import Show, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    user: Optional[User] = None
    shows: tuple[Show, ...] = ()


StateListener = Callable[[SessionState], None]


def decode_shows(documents: List[StoredDocument]) -> tuple[Show, ...]:
    """Decodes a live-query push, skipping documents that fail to decode."""
    shows = []
    for document in documents:
        try:
            shows.append(show_from_document(document.id, document.data))
        except DaciteError as e:
            logger.warning("Skipping malformed show document %s: %s", document.id, e)
    return tuple(shows)


class ShowListViewModel:
    """
    Holds the signed-in user's profile and show list.

    The profile fetch and the show-list subscription both start on
    construction. The subscription lives until `close()` is called, or the
    view-model is used as a context manager and the block exits.
    """

    def __init__(self, auth: AuthClient, store: DocumentStore):
        self._auth = auth
        self._store = store
        self._state = SessionState()
        self._listeners: List[StateListener] = []
        self._subscription: Optional[Subscription] = None

        self.load_current_user()
        self.subscribe_to_show_list()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user(self) -> Optional[User]:
        return self._state.user

    @property
    def shows(self) -> tuple[Show, ...]:
        return self._state.shows

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        self._listeners.remove(listener)

    def load_current_user(self) -> None:
        uid = self._auth.current_user_uid
        if not uid:
            return

        try:
            data = self._store.get(USERS_COLLECTION, uid)
        except StoreError as e:
            logger.error("Cant get current user: %s", e)
            return
        if data is None:
            logger.error("No profile document found for user %s", uid)
            return

        self._publish(dataclasses.replace(self._state, user=user_from_document(data)))

    def subscribe_to_show_list(self) -> None:
        uid = self._auth.current_user_uid
        if not uid:
            return

        self._release_subscription()
        try:
            self._subscription = self._store.subscribe(
                SHOWS_COLLECTION, SHOW_OWNER_FIELD, uid, self._on_shows_snapshot
            )
        except StoreError as e:
            logger.error("Cant subscribe to shows for user %s: %s", uid, e)

    def close(self) -> None:
        self._release_subscription()

    def __enter__(self) -> "ShowListViewModel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_shows_snapshot(self, documents: List[StoredDocument]) -> None:
        self._publish(dataclasses.replace(self._state, shows=decode_shows(documents)))

    def _release_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _publish(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
