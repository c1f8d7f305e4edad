"""Operator session: the selection state a courtside UI keeps between taps."""

from typing import Optional

from ..models import PlayerRef, ShotLocation, StatAction, StatType
from ..utils import PERSPECTIVE_TEAM_A_UP
from .errors import NoPlayerSelected
from .game_engine import GameEngine
from .shot_location import PERSPECTIVES
from .stat_recorder import RecordResult


class TrackerSession:
    """
    Holds the operator's current selection and turns button presses into
    engine commands.
    """

    def __init__(self, engine: GameEngine):
        self.engine = engine
        self.selected_team_id: Optional[str] = None
        self.selected_player: Optional[PlayerRef] = None
        self.opponent_selected = False
        self.perspective = PERSPECTIVE_TEAM_A_UP

    def select_player(self, team_id: str, player: PlayerRef) -> None:
        self.engine.game_state.side_for(team_id)
        self.selected_team_id = team_id
        self.selected_player = player
        self.opponent_selected = False

    def select_opponent(self, team_id: str) -> None:
        """Coach mode: attribute the next stats to the untracked opponent."""
        self.engine.game_state.side_for(team_id)
        self.selected_team_id = team_id
        self.selected_player = None
        self.opponent_selected = True

    def clear_selection(self) -> None:
        self.selected_team_id = None
        self.selected_player = None
        self.opponent_selected = False

    @property
    def has_selection(self) -> bool:
        return self.selected_team_id is not None and (
            self.selected_player is not None or self.opponent_selected
        )

    def _require_selection(self) -> None:
        if not self.has_selection:
            raise NoPlayerSelected()

    def record(
        self,
        stat_type: StatType,
        modifier: Optional[str] = None,
        shot_location: Optional[ShotLocation] = None,
    ) -> RecordResult:
        """Record a stat for the selected player (or opponent)."""
        self._require_selection()
        return self.engine.record(StatAction(
            team_id=self.selected_team_id,
            stat_type=stat_type,
            modifier=modifier,
            player_ref=self.selected_player,
            is_opponent_stat=self.opponent_selected,
            shot_location=shot_location,
        ))

    def tap_court(
        self,
        pixel_x: float,
        pixel_y: float,
        container_width: float,
        container_height: float,
        made: bool,
    ) -> RecordResult:
        """Record a shot at a tapped position using the session's court perspective."""
        self._require_selection()
        return self.engine.record_shot_from_tap(
            self.selected_team_id,
            self.selected_player,
            made,
            pixel_x,
            pixel_y,
            container_width,
            container_height,
            perspective=self.perspective,
            is_opponent_stat=self.opponent_selected,
        )

    def substitute_selected(self, player_in: PlayerRef) -> RecordResult:
        """Sub the selected player out; the selection follows the incoming player."""
        self._require_selection()
        if self.selected_player is None:
            raise NoPlayerSelected("Select the player coming off the court")
        result = self.engine.substitute(self.selected_team_id, self.selected_player, player_in)
        self.selected_player = player_in
        return result

    def set_perspective(self, perspective: str) -> None:
        if perspective not in PERSPECTIVES:
            raise ValueError(f"Unknown court perspective: {perspective!r}")
        self.perspective = perspective
