"""Possession tracking for the Courtside live tracker."""

import logging
from typing import Optional

from ..models import GameState

logger = logging.getLogger(__name__)


class PossessionService:
    """
    Tracks current possession and the alternating-possession arrow.

    The arrow is kept separate from possession: after a held ball the team
    entitled to the next jump-ball possession can differ from the team that
    has the ball right now.
    """

    def __init__(self, game_state: GameState):
        self.game_state = game_state

    def set_possession(self, team_id: str) -> None:
        self.game_state.side_for(team_id)
        self.game_state.possession_team_id = team_id

    def set_arrow(self, team_id: str) -> None:
        self.game_state.side_for(team_id)
        self.game_state.possession_arrow = team_id

    def flip_arrow(self) -> Optional[str]:
        """Point the arrow at the other team, e.g. after it has been used."""
        current = self.game_state.possession_arrow
        if current is None:
            return None
        home, away = self.game_state.team_ids()
        self.game_state.possession_arrow = away if current == home else home
        logger.debug("Possession arrow now points to %s", self.game_state.possession_arrow)
        return self.game_state.possession_arrow

    def resolve_jump_ball(self) -> Optional[str]:
        """
        Award a held ball to the team the arrow points at, then flip the arrow.

        Returns:
            The team given possession, or None when no arrow is set
        """
        awarded = self.game_state.possession_arrow
        if awarded is None:
            return None
        self.game_state.possession_team_id = awarded
        self.flip_arrow()
        logger.info("Jump ball awarded to %s", awarded)
        return awarded

    def jump_ball_indicator(self) -> bool:
        """True when the arrow is set and differs from current possession."""
        return (
            self.game_state.possession_arrow is not None
            and self.game_state.possession_arrow != self.game_state.possession_team_id
        )
