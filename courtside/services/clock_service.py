"""Clock services for the Courtside live tracker.

The game clock and the shot clock are independent controllers that operate
directly on the GameState they are given. Neither touches the other.
"""

import logging
from typing import Optional

from ..models import GameState
from ..utils import SHOT_CLOCK_FULL, SHOT_CLOCK_SHORT, SHOT_CLOCK_MAX

logger = logging.getLogger(__name__)


class GameClockService:
    """Service for the game clock and period progression."""

    def __init__(self, game_state: GameState):
        self.game_state = game_state

    # ------------------------------------------------------------------
    # Core clock controls
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Start the game clock. A clock at 0:00 stays stopped."""

        if self.game_state.clock_seconds_remaining <= 0:
            self.game_state.clock_running = False
            return
        self.game_state.clock_running = True

    def stop(self) -> None:
        """Stop the game clock."""

        self.game_state.clock_running = False

    def reset(self, to_seconds: Optional[int] = None) -> None:
        """Stop the clock and reset it, by default to the current period length."""

        if to_seconds is None:
            to_seconds = self.game_state.period_length_for(self.game_state.quarter)
        self.game_state.clock_running = False
        self.game_state.clock_seconds_remaining = max(0, int(to_seconds))

    def set_custom(self, minutes: int, seconds: int) -> None:
        """Set an arbitrary clock reading.

        Applied regardless of the running state; editing UIs decide whether
        to allow it while the clock runs.

        Raises:
            ValueError: If minutes or seconds are out of range
        """

        minutes = int(minutes)
        seconds = int(seconds)
        if minutes < 0 or not 0 <= seconds <= 59:
            raise ValueError("Clock must be set with minutes >= 0 and seconds 0-59")
        self.game_state.clock_seconds_remaining = minutes * 60 + seconds

    def tick(self) -> None:
        """Advance the running clock by one second, stopping at 0:00."""

        if not self.game_state.clock_running:
            return
        self.game_state.clock_seconds_remaining = max(0, self.game_state.clock_seconds_remaining - 1)
        if self.game_state.clock_seconds_remaining == 0:
            self.game_state.clock_running = False
            logger.info("Game clock expired in quarter %s", self.game_state.quarter)

    # ------------------------------------------------------------------
    # Period helpers
    # ------------------------------------------------------------------
    def advance_quarter(self) -> int:
        """Move to the next period and reset the clock to its length.

        Team fouls are left alone; resetting them is a separate rule.
        """

        self.game_state.quarter += 1
        self.reset()
        logger.info("Advanced to quarter %s", self.game_state.quarter)
        return self.game_state.quarter

    def reset_team_fouls(self) -> None:
        """Clear both team-foul counters."""

        self.game_state.team_fouls_home = 0
        self.game_state.team_fouls_away = 0

    def is_expired(self) -> bool:
        return self.game_state.clock_seconds_remaining == 0


class ShotClockService:
    """Service for the shot clock. Visibility never affects counting."""

    def __init__(self, game_state: GameState):
        self.game_state = game_state

    def start(self) -> None:
        if self.game_state.shot_clock_seconds_remaining <= 0:
            self.game_state.shot_clock_running = False
            return
        self.game_state.shot_clock_running = True

    def stop(self) -> None:
        self.game_state.shot_clock_running = False

    def reset(self, to_seconds: int = SHOT_CLOCK_FULL) -> None:
        """Reset the shot clock without changing its running state."""

        self.game_state.shot_clock_seconds_remaining = _clamp_shot_clock(to_seconds)

    def reset_full(self) -> None:
        self.reset(SHOT_CLOCK_FULL)

    def reset_short(self) -> None:
        self.reset(SHOT_CLOCK_SHORT)

    def set_time(self, seconds: int) -> None:
        self.game_state.shot_clock_seconds_remaining = _clamp_shot_clock(seconds)

    def tick(self) -> None:
        """Advance the running shot clock by one second, stopping at zero."""

        if not self.game_state.shot_clock_running:
            return
        self.game_state.shot_clock_seconds_remaining = max(
            0, self.game_state.shot_clock_seconds_remaining - 1
        )
        if self.game_state.shot_clock_seconds_remaining == 0:
            self.game_state.shot_clock_running = False
            logger.info("Shot clock expired")

    def set_visible(self, visible: bool) -> None:
        self.game_state.shot_clock_visible = bool(visible)

    def toggle_visibility(self) -> bool:
        self.game_state.shot_clock_visible = not self.game_state.shot_clock_visible
        return self.game_state.shot_clock_visible


def _clamp_shot_clock(seconds: int) -> int:
    return max(0, min(SHOT_CLOCK_MAX, int(seconds)))
