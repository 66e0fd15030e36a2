"""
Show-list mutations.

Each operation issues at most one remote write and returns whether a write
was made and accepted. None of them touch local state: the view-model picks
up the result from the next live-query push. Failures are logged, never
raised, and never retried.

Increment and decrement write an absolute count computed from the caller's
copy of the show rather than an atomic server-side increment, so two quick
changes made against the same stale copy can lose one of the updates.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Union

from episode_tracker.errors import StoreError
from episode_tracker.store import DocumentStore
from shared.convert import show_to_document
from shared.firebase_constants import SHOW_EP_COUNT_FIELD, SHOWS_COLLECTION
from shared.types import Show, new_show_id

logger = logging.getLogger(__name__)

MIN_EP_COUNT = 1


def parse_ep_count(value: Union[int, str, None]) -> int:
    """Parses episode input, defaulting to 1 for anything unparseable or below 1."""
    if isinstance(value, bool):
        return MIN_EP_COUNT
    if isinstance(value, int):
        count = value
    else:
        try:
            count = int(str(value).strip())
        except ValueError:
            return MIN_EP_COUNT
    return max(count, MIN_EP_COUNT)


def add_show(
    store: DocumentStore,
    show_name: str,
    uid: str,
    ep_count: Union[int, str, None] = MIN_EP_COUNT,
) -> Optional[Show]:
    """
    Writes a new show owned by `uid` with a freshly generated id.

    Returns:
        The show that was written, or None if there is no owner or the
        write failed.
    """
    if not uid:
        logger.error("Refusing to add show %r without an owner", show_name)
        return None
    show = Show(
        show_name=show_name,
        uid=uid,
        ep_count=parse_ep_count(ep_count),
        id=new_show_id(),
    )
    try:
        store.set(SHOWS_COLLECTION, show.id, show_to_document(show))
    except StoreError as e:
        logger.error("Failed to add show %r: %s", show_name, e)
        return None
    logger.info("Added show %s (%r)", show.id, show_name)
    return show


def _write_ep_count(store: DocumentStore, show: Show, ep_count: int) -> bool:
    if not show.id:
        return False
    try:
        store.update(SHOWS_COLLECTION, show.id, {SHOW_EP_COUNT_FIELD: ep_count})
    except StoreError as e:
        logger.error("Failed to update episode count of %s: %s", show.id, e)
        return False
    return True


def increment_episode(store: DocumentStore, show: Show) -> bool:
    return _write_ep_count(store, show, show.ep_count + 1)


def decrement_episode(store: DocumentStore, show: Show) -> bool:
    if show.ep_count <= MIN_EP_COUNT:
        return False
    return _write_ep_count(store, show, show.ep_count - 1)


def delete_show(store: DocumentStore, show: Show) -> bool:
    if not show.id:
        return False
    try:
        store.delete(SHOWS_COLLECTION, show.id)
    except StoreError as e:
        logger.error("Couldn't delete document %s: %s", show.id, e)
        return False
    logger.info("Deleted document %s", show.id)
    return True


def delete_shows(
    store: DocumentStore, shows: Sequence[Show], offsets: Iterable[int]
) -> int:
    """
    Deletes the shows at the given positions of a displayed list.

    Offsets outside `0 <= offset < len(shows)` are logged and skipped.

    Returns:
        The number of documents deleted.
    """
    targets = []
    for offset in offsets:
        if not 0 <= offset < len(shows):
            logger.warning("Ignoring delete at invalid position %d", offset)
            continue
        targets.append(shows[offset])
    return sum(delete_show(store, show) for show in targets)
