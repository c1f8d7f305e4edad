"""
Opt-in possession and clock automation for the Courtside live tracker.

Both switches are off by default; operators who want the tracker to follow
the ball and reset the shot clock turn them on per game.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models import GameState, StatEvent, StatType
from ..models.stat_event import SHOT_TYPES
from ..utils import SHOT_CLOCK_FULL, SHOT_CLOCK_SHORT
from .clock_service import ShotClockService
from .possession_service import PossessionService

logger = logging.getLogger(__name__)

_PAUSE_TYPES = (StatType.FOUL, StatType.TIMEOUT, StatType.TURNOVER)


@dataclass(frozen=True)
class AutomationFlags:
    """Which automatic follow-ups run after a recorded event."""
    possession: bool = False
    clock: bool = False

    @property
    def enabled(self) -> bool:
        return self.possession or self.clock

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AutomationFlags':
        data = data or {}
        return cls(possession=bool(data.get("possession")), clock=bool(data.get("clock")))

    def to_dict(self) -> Dict[str, bool]:
        return {"possession": self.possession, "clock": self.clock}


def _is_made_shot(event: StatEvent) -> bool:
    return event.stat_type in SHOT_TYPES and event.modifier == "made"


class AutomationService:
    """Applies possession and clock follow-ups for an event already recorded."""

    def __init__(self, game_state: GameState, flags: AutomationFlags = AutomationFlags()):
        self.game_state = game_state
        self.flags = flags
        self.possession = PossessionService(game_state)
        self.shot_clock = ShotClockService(game_state)

    def after_event(self, event: StatEvent) -> None:
        if self.flags.possession:
            self._follow_possession(event)
        if self.flags.clock:
            self._follow_clock(event)

    def possession_after(self, event: StatEvent) -> Optional[str]:
        """Team that should have the ball after ``event``, or None for no change."""
        acting = event.team_id
        if _is_made_shot(event):
            return self._opponent_of(acting)
        if event.stat_type in (StatType.TURNOVER, StatType.FOUL):
            return self._opponent_of(acting)
        if event.stat_type in (StatType.STEAL, StatType.REBOUND):
            return acting
        return None

    def shot_clock_after(self, event: StatEvent) -> Optional[int]:
        """Shot clock reading after ``event``, or None to leave it alone."""
        current = self.game_state.shot_clock_seconds_remaining
        if _is_made_shot(event) or event.stat_type in (StatType.TURNOVER, StatType.STEAL):
            return SHOT_CLOCK_FULL
        if event.stat_type == StatType.REBOUND:
            if event.modifier == "defensive":
                return SHOT_CLOCK_FULL
            if current < SHOT_CLOCK_SHORT:
                return SHOT_CLOCK_SHORT
        return None

    def _follow_possession(self, event: StatEvent) -> None:
        team_id = self.possession_after(event)
        if team_id is None or team_id == self.game_state.possession_team_id:
            return
        self.possession.set_possession(team_id)
        logger.debug("Possession to %s after %s", team_id, event.stat_type.value)

    def _follow_clock(self, event: StatEvent) -> None:
        if event.stat_type in _PAUSE_TYPES:
            self.game_state.clock_running = False
            self.shot_clock.stop()
        seconds = self.shot_clock_after(event)
        if seconds is not None:
            self.shot_clock.reset(seconds)
            logger.debug("Shot clock reset to %s after %s", seconds, event.stat_type.value)

    def _opponent_of(self, team_id: str) -> str:
        home, away = self.game_state.team_ids()
        return away if team_id == home else home
