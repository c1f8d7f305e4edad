"""
Unit tests for event sinks, the background persistence dispatcher and game
snapshot files.
"""
import json
import os
import tempfile
import unittest

from courtside.models import GameState, GameStatus, PlayerRef, ShotLocation, StatType
from courtside.models.stat_event import StatEvent
from courtside.services import (
    InMemoryEventStore, JsonFileEventStore, PersistenceDispatcher, PersistenceFailure,
    PersistenceService
)


def make_event(event_id: str, game_id: str = "g1", created_at: float = 100.0) -> StatEvent:
    return StatEvent(
        id=event_id,
        game_id=game_id,
        team_id="home",
        player_ref=PlayerRef("h1"),
        stat_type=StatType.THREE_POINTER,
        modifier="made",
        value=3,
        quarter=2,
        clock_minutes_snapshot=4,
        clock_seconds_snapshot=12,
        created_at=created_at,
        shot_location=ShotLocation(x=5.0, y=10.0, zone="corner_3_left"),
    )


class TestJsonFileEventStore(unittest.TestCase):
    """Test cases for the file-backed event sink."""

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.store = JsonFileEventStore(os.path.join(self.tmp.name, "events"))

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_persist_is_idempotent(self) -> None:
        event = make_event("e1")
        self.store.persist_event(event)
        self.store.persist_event(event)

        events = self.store.load_events("g1")
        self.assertEqual(events, [event])

    def test_events_loaded_in_creation_order(self) -> None:
        self.store.persist_event(make_event("late", created_at=200.0))
        self.store.persist_event(make_event("early", created_at=50.0))
        self.assertEqual([e.id for e in self.store.load_events("g1")], ["early", "late"])

    def test_delete_event(self) -> None:
        self.store.persist_event(make_event("e1"))
        self.store.persist_event(make_event("e2", game_id="g2"))

        self.store.delete_event("e2")
        self.store.delete_event("missing")

        self.assertEqual(self.store.load_events("g2"), [])
        self.assertEqual(len(self.store.load_events("g1")), 1)

    def test_file_layout(self) -> None:
        self.store.persist_event(make_event("e1"))
        path = os.path.join(self.tmp.name, "events", "game_g1_events.json")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["events"]["e1"]["stat_type"], "three_pointer")
        self.assertEqual(data["events"]["e1"]["shot_location"]["zone"], "corner_3_left")


class TestPersistenceDispatcher(unittest.TestCase):
    """Test cases for background writes."""

    def test_writes_reach_the_sink(self) -> None:
        store = InMemoryEventStore()
        dispatcher = PersistenceDispatcher(store)
        event = make_event("e1")

        dispatcher.persist(event)
        dispatcher.flush(timeout=5)
        self.assertEqual(store.all_events(), [event])

        dispatcher.delete(event)
        dispatcher.flush(timeout=5)
        self.assertEqual(len(store), 0)
        dispatcher.shutdown()

    def test_failures_are_collected_and_reported(self) -> None:
        class BrokenSink:
            def persist_event(self, event):
                raise OSError("read-only filesystem")

            def delete_event(self, event_id):
                pass

        reported = []
        dispatcher = PersistenceDispatcher(BrokenSink(), on_failure=reported.append)
        dispatcher.persist(make_event("e1"))
        dispatcher.flush(timeout=5)

        self.assertEqual(len(dispatcher.failures), 1)
        self.assertIsInstance(reported[0], PersistenceFailure)
        self.assertEqual(reported[0].event_id, "e1")
        self.assertEqual(reported[0].code, "persistence_failure")
        dispatcher.shutdown()

    def test_failing_callback_does_not_break_worker(self) -> None:
        class BrokenSink:
            def persist_event(self, event):
                raise OSError("gone")

            def delete_event(self, event_id):
                pass

        def explode(failure):
            raise RuntimeError("handler bug")

        dispatcher = PersistenceDispatcher(BrokenSink(), on_failure=explode)
        dispatcher.persist(make_event("e1"))
        dispatcher.flush(timeout=5)
        self.assertEqual(len(dispatcher.failures), 1)
        dispatcher.shutdown()


class TestPersistenceService(unittest.TestCase):
    """Test cases for game snapshot files."""

    def test_save_and_load_game(self) -> None:
        state = GameState(game_id="g7", home_team_id="lions", away_team_id="tigers")
        state.status = GameStatus.IN_PROGRESS
        state.score_home = 41
        state.quarter = 3

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "saves", "game.json")
            PersistenceService.save_game_to_file(state, path)
            loaded = PersistenceService.load_game_from_file(path)

        self.assertEqual(loaded, state)

    def test_load_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            PersistenceService.load_game_from_file("/nonexistent/game.json")


if __name__ == "__main__":
    unittest.main()
