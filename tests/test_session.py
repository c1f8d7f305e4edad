import unittest

from courtside.models import GameState, PlayerRef, StatType
from courtside.services import GameEngine, NoPlayerSelected, TrackerSession
from courtside.utils import PERSPECTIVE_TEAM_B_UP

HOME = [PlayerRef(f"h{i}") for i in range(1, 7)]


class TrackerSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = GameEngine(GameState(game_id="g1"), opponent_team_id="away", debounce_window=0)
        self.engine.load_team("home", HOME, HOME[:5])
        self.engine.start_game()
        self.engine.start_clock()
        self.session = TrackerSession(self.engine)

    def test_record_without_selection(self) -> None:
        with self.assertRaises(NoPlayerSelected):
            self.session.record(StatType.REBOUND, "offensive")
        self.assertEqual(self.engine.events, [])

    def test_record_for_selected_player(self) -> None:
        self.session.select_player("home", HOME[2])
        result = self.session.record(StatType.THREE_POINTER, "made")
        self.assertEqual(result.event.player_ref, HOME[2])
        self.assertEqual(self.engine.game_state.score_home, 3)

    def test_opponent_selection(self) -> None:
        self.session.select_opponent("away")
        result = self.session.record(StatType.FIELD_GOAL, "made")
        self.assertTrue(result.event.is_opponent_stat)
        self.assertEqual(self.engine.game_state.score_away, 2)

        self.session.clear_selection()
        self.assertFalse(self.session.has_selection)

    def test_tap_court_uses_session_perspective(self) -> None:
        self.session.select_player("home", HOME[0])
        self.session.set_perspective(PERSPECTIVE_TEAM_B_UP)
        result = self.session.tap_court(200, 40, 400, 400, made=True)
        self.assertEqual(result.event.shot_location.zone, "top_3")
        self.assertEqual(result.event.value, 3)

        with self.assertRaises(ValueError):
            self.session.set_perspective("sideways")

    def test_substitute_selected_follows_incoming_player(self) -> None:
        self.session.select_player("home", HOME[0])
        self.session.substitute_selected(HOME[5])
        self.assertEqual(self.session.selected_player, HOME[5])
        self.assertIn(HOME[0], self.engine.game_state.rosters["home"].bench)

    def test_selecting_unknown_team(self) -> None:
        with self.assertRaises(ValueError):
            self.session.select_player("bears", HOME[0])


if __name__ == "__main__":
    unittest.main()
