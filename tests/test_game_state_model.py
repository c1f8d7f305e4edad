"""
Unit tests for the GameState model and the small time helpers it is displayed with.
"""
import unittest

from courtside.models import GameState, GameStatus, PlayerRef, RosterState
from courtside.utils import fmt_mmss, shot_clock_level, split_mmss


class TestGameStateModel(unittest.TestCase):
    """Test cases for GameState."""

    def setUp(self) -> None:
        self.state = GameState(game_id="g1", home_team_id="lions", away_team_id="tigers")

    def test_defaults(self) -> None:
        self.assertEqual(self.state.quarter, 1)
        self.assertEqual(self.state.clock_seconds_remaining, 600)
        self.assertEqual(self.state.shot_clock_seconds_remaining, 24)
        self.assertTrue(self.state.shot_clock_visible)
        self.assertEqual(self.state.status, GameStatus.SCHEDULED)
        self.assertFalse(self.state.is_active)
        self.assertIsNone(self.state.possession_arrow)

    def test_side_for_known_and_unknown_teams(self) -> None:
        self.assertEqual(self.state.side_for("lions"), "home")
        self.assertEqual(self.state.side_for("tigers"), "away")
        with self.assertRaises(ValueError):
            self.state.side_for("bears")

    def test_team_helpers_update_the_right_side(self) -> None:
        self.state.add_score("tigers", 3)
        self.state.add_team_foul("lions")
        self.state.use_timeout("tigers")

        self.assertEqual(self.state.score_away, 3)
        self.assertEqual(self.state.score_home, 0)
        self.assertEqual(self.state.fouls_for("lions"), 1)
        self.assertEqual(self.state.timeouts_remaining_away, 6)
        self.assertEqual(self.state.timeouts_for("lions"), 7)

    def test_bonus_threshold(self) -> None:
        self.state.team_fouls_home = 4
        self.assertFalse(self.state.bonus_home)
        self.assertFalse(self.state.in_bonus("lions"))

        self.state.team_fouls_home = 5
        self.assertTrue(self.state.bonus_home)
        self.assertTrue(self.state.in_bonus("lions"))
        self.assertFalse(self.state.bonus_away)

    def test_period_length_switches_in_overtime(self) -> None:
        self.assertEqual(self.state.period_length_for(4), 600)
        self.assertEqual(self.state.period_length_for(5), 300)
        self.state.quarter = 5
        self.assertTrue(self.state.is_overtime)

    def test_copy_is_independent(self) -> None:
        players = {PlayerRef(str(i)) for i in range(5)}
        self.state.rosters["lions"] = RosterState(team_id="lions", on_court=set(players), bench=set())

        snapshot = self.state.copy()
        self.state.score_home = 10
        self.state.rosters["lions"].on_court.clear()

        self.assertEqual(snapshot.score_home, 0)
        self.assertEqual(snapshot.rosters["lions"].on_court, players)

    def test_restore_overwrites_in_place(self) -> None:
        snapshot = self.state.copy()
        original = self.state
        self.state.score_home = 12
        self.state.status = GameStatus.IN_PROGRESS
        self.state.possession_arrow = "tigers"

        self.state.restore(snapshot)

        self.assertIs(self.state, original)
        self.assertEqual(self.state, snapshot)

    def test_json_round_trip_preserves_rosters(self) -> None:
        starters = {PlayerRef(str(i)) for i in range(5)}
        bench = {PlayerRef("7", is_custom=True)}
        self.state.rosters["lions"] = RosterState(team_id="lions", on_court=starters, bench=bench)
        self.state.status = GameStatus.IN_PROGRESS
        self.state.possession_team_id = "lions"

        restored = GameState.from_json(self.state.to_json())

        self.assertEqual(restored, self.state)
        self.assertIn(PlayerRef("7", is_custom=True), restored.rosters["lions"].bench)
        self.assertNotIn(PlayerRef("7"), restored.rosters["lions"].bench)

    def test_from_json_clamps_out_of_range_values(self) -> None:
        restored = GameState.from_json({
            "quarter": 0,
            "clock_seconds_remaining": -20,
            "shot_clock_seconds_remaining": 99,
            "score_home": -3,
        })
        self.assertEqual(restored.quarter, 1)
        self.assertEqual(restored.clock_seconds_remaining, 0)
        self.assertEqual(restored.shot_clock_seconds_remaining, 35)
        self.assertEqual(restored.score_home, 0)


def test_fmt_mmss_formats_and_clamps():
    assert fmt_mmss(600) == "10:00"
    assert fmt_mmss(65) == "01:05"
    assert fmt_mmss(0) == "00:00"
    assert fmt_mmss(-4) == "00:00"


def test_split_mmss():
    assert split_mmss(330) == (5, 30)
    assert split_mmss(59) == (0, 59)


def test_shot_clock_level_thresholds():
    assert shot_clock_level(24) == "normal"
    assert shot_clock_level(11) == "normal"
    assert shot_clock_level(10) == "warning"
    assert shot_clock_level(6) == "warning"
    assert shot_clock_level(5) == "critical"
    assert shot_clock_level(0) == "critical"


if __name__ == "__main__":
    unittest.main()
