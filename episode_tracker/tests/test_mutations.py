import random
import unittest

from episode_tracker import mutations
from episode_tracker.auth import InMemoryAuthClient
from episode_tracker.store import InMemoryDocumentStore
from episode_tracker.view_model import ShowListViewModel
from shared.types import Show


class ParseEpCountTests(unittest.TestCase):
    def test_parses_numbers_and_defaults_to_one(self):
        self.assertEqual(mutations.parse_ep_count("3"), 3)
        self.assertEqual(mutations.parse_ep_count(" 12 "), 12)
        self.assertEqual(mutations.parse_ep_count(4), 4)
        self.assertEqual(mutations.parse_ep_count("abc"), 1)
        self.assertEqual(mutations.parse_ep_count(""), 1)
        self.assertEqual(mutations.parse_ep_count("2.5"), 1)
        self.assertEqual(mutations.parse_ep_count(None), 1)
        self.assertEqual(mutations.parse_ep_count("0"), 1)
        self.assertEqual(mutations.parse_ep_count(-3), 1)


class MutationTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.auth = InMemoryAuthClient(current_user_uid="u1")
        self.view_model = ShowListViewModel(self.auth, self.store)

    def tearDown(self):
        self.view_model.close()

    def _only_show(self) -> Show:
        self.assertEqual(len(self.view_model.shows), 1)
        return self.view_model.shows[0]

    def test_add_then_push_shows_exactly_that_show(self):
        show = mutations.add_show(self.store, "Foo", "u1", "3")

        self.assertEqual(
            self.view_model.shows,
            (Show(show_name="Foo", uid="u1", ep_count=3, id=show.id),),
        )
        self.assertEqual(
            self.store.get("shows", show.id),
            {"showName": "Foo", "uid": "u1", "epCount": 3},
        )

    def test_add_with_non_numeric_episode_defaults_to_one(self):
        mutations.add_show(self.store, "Foo", "u1", "pilot")
        self.assertEqual(self._only_show().ep_count, 1)

    def test_add_generates_distinct_ids(self):
        first = mutations.add_show(self.store, "Foo", "u1")
        second = mutations.add_show(self.store, "Foo", "u1")
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(self.view_model.shows), 2)

    def test_add_failure_returns_none(self):
        self.store.fail_writes = True
        with self.assertLogs("episode_tracker.mutations", level="ERROR"):
            self.assertIsNone(mutations.add_show(self.store, "Foo", "u1", "2"))
        self.assertEqual(self.view_model.shows, ())

    def test_add_without_owner_issues_no_write(self):
        with self.assertLogs("episode_tracker.mutations", level="ERROR"):
            self.assertIsNone(mutations.add_show(self.store, "Foo", "", "1"))
        self.assertEqual(self.store.writes, [])
        self.assertEqual(self.store.collections.get("shows", {}), {})

    def test_increment_writes_partial_update(self):
        mutations.add_show(self.store, "Foo", "u1", "1")
        self.store.writes.clear()

        self.assertTrue(mutations.increment_episode(self.store, self._only_show()))

        self.assertEqual(len(self.store.writes), 1)
        write = self.store.writes[0]
        self.assertEqual((write.op, write.fields), ("update", {"epCount": 2}))
        self.assertEqual(self._only_show().ep_count, 2)
        self.assertEqual(self._only_show().show_name, "Foo")

    def test_decrement_lowers_count(self):
        mutations.add_show(self.store, "Foo", "u1", "3")
        self.assertTrue(mutations.decrement_episode(self.store, self._only_show()))
        self.assertEqual(self._only_show().ep_count, 2)

    def test_decrement_at_one_issues_no_write(self):
        mutations.add_show(self.store, "Foo", "u1", "1")
        before = self.view_model.state
        self.store.writes.clear()

        self.assertFalse(mutations.decrement_episode(self.store, self._only_show()))

        self.assertEqual(self.store.writes, [])
        self.assertIs(self.view_model.state, before)

    def test_ep_count_never_drops_below_one(self):
        mutations.add_show(self.store, "Foo", "u1", "2")
        rng = random.Random(7)
        for _ in range(200):
            operation = rng.choice(
                [mutations.increment_episode, mutations.decrement_episode]
            )
            operation(self.store, self._only_show())
            self.assertGreaterEqual(self._only_show().ep_count, 1)

    def test_stale_copy_loses_an_update(self):
        mutations.add_show(self.store, "Foo", "u1", "5")
        stale = self._only_show()

        mutations.increment_episode(self.store, stale)
        mutations.increment_episode(self.store, stale)

        self.assertEqual(self._only_show().ep_count, 6)

    def test_delete_removes_show_after_push(self):
        show = mutations.add_show(self.store, "Foo", "u1")
        self.assertTrue(mutations.delete_show(self.store, self._only_show()))
        self.assertEqual(self.view_model.shows, ())
        self.assertIsNone(self.store.get("shows", show.id))

    def test_delete_without_id_issues_no_write(self):
        self.assertFalse(
            mutations.delete_show(self.store, Show(show_name="Foo", uid="u1", ep_count=1))
        )
        self.assertFalse(
            mutations.increment_episode(
                self.store, Show(show_name="Foo", uid="u1", ep_count=1, id="")
            )
        )
        self.assertEqual(self.store.writes, [])

    def test_delete_failure_is_logged(self):
        mutations.add_show(self.store, "Foo", "u1")
        self.store.fail_writes = True
        with self.assertLogs("episode_tracker.mutations", level="ERROR"):
            self.assertFalse(mutations.delete_show(self.store, self._only_show()))
        self.assertEqual(len(self.view_model.shows), 1)

    def test_delete_shows_by_offset(self):
        for name in ("A", "B", "C"):
            mutations.add_show(self.store, name, "u1")
        shows = self.view_model.shows

        deleted = mutations.delete_shows(self.store, shows, [0, 2])

        self.assertEqual(deleted, 2)
        self.assertEqual(self.view_model.shows, (shows[1],))

    def test_delete_shows_skips_invalid_offsets(self):
        for name in ("A", "B"):
            mutations.add_show(self.store, name, "u1")
        shows = self.view_model.shows
        self.store.writes.clear()

        with self.assertLogs("episode_tracker.mutations", level="WARNING"):
            deleted = mutations.delete_shows(self.store, shows, [-1, 2, 0])

        self.assertEqual(deleted, 1)
        self.assertEqual(len(self.store.writes), 1)
        self.assertEqual(self.view_model.shows, (shows[1],))


if __name__ == "__main__":
    unittest.main()
