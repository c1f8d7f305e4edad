import unittest

from courtside.models import GameState
from courtside.services import PossessionService


class PossessionServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = GameState(home_team_id="lions", away_team_id="tigers")
        self.service = PossessionService(self.state)

    def test_arrow_and_possession_are_independent(self) -> None:
        self.service.set_possession("lions")
        self.service.set_arrow("tigers")
        self.assertEqual(self.state.possession_team_id, "lions")
        self.assertEqual(self.state.possession_arrow, "tigers")
        self.assertTrue(self.service.jump_ball_indicator())

        self.service.set_possession("tigers")
        self.assertFalse(self.service.jump_ball_indicator())

    def test_flip_arrow(self) -> None:
        self.assertIsNone(self.service.flip_arrow())

        self.service.set_arrow("lions")
        self.assertEqual(self.service.flip_arrow(), "tigers")
        self.assertEqual(self.service.flip_arrow(), "lions")

    def test_resolve_jump_ball(self) -> None:
        self.assertIsNone(self.service.resolve_jump_ball())
        self.assertIsNone(self.state.possession_team_id)

        self.service.set_possession("lions")
        self.service.set_arrow("tigers")
        self.assertEqual(self.service.resolve_jump_ball(), "tigers")
        self.assertEqual(self.state.possession_team_id, "tigers")
        self.assertEqual(self.state.possession_arrow, "lions")
        self.assertTrue(self.service.jump_ball_indicator())

    def test_no_indicator_before_arrow_is_set(self) -> None:
        self.service.set_possession("lions")
        self.assertFalse(self.service.jump_ball_indicator())

    def test_unknown_team_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.service.set_possession("bears")
        with self.assertRaises(ValueError):
            self.service.set_arrow("bears")
        self.assertIsNone(self.state.possession_team_id)


if __name__ == "__main__":
    unittest.main()
