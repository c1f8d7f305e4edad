"""
GameState model for the Courtside live tracker.

This module contains the GameState dataclass which represents the complete,
authoritative state of one basketball game: clocks, score, fouls, timeouts,
possession, on-court rosters and lifecycle status.
"""
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Optional

from .player import RosterState
from ..utils import (
    DEFAULT_QUARTER_LENGTH_MIN, DEFAULT_OVERTIME_LENGTH_MIN,
    DEFAULT_TIMEOUTS_PER_TEAM, SHOT_CLOCK_FULL, SHOT_CLOCK_MAX,
    BONUS_FOUL_THRESHOLD, REGULATION_QUARTERS
)


class GameStatus(Enum):
    """Externally visible lifecycle status of a game."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


HOME = "home"
AWAY = "away"


@dataclass
class GameState:
    """
    Represents the complete state of a game in progress.

    Attributes:
        game_id: Identifier of the game
        home_team_id: Team id of the home side
        away_team_id: Team id of the away side
        quarter: Current period (5 and above are overtime periods)
        clock_seconds_remaining: Game clock reading
        clock_running: Whether the game clock is counting down
        shot_clock_seconds_remaining: Shot clock reading (0-35)
        shot_clock_running: Whether the shot clock is counting down
        shot_clock_visible: Display toggle only, never affects counting
        score_home: Home points
        score_away: Away points
        team_fouls_home: Home team fouls in the current period
        team_fouls_away: Away team fouls in the current period
        timeouts_remaining_home: Home timeouts left
        timeouts_remaining_away: Away timeouts left
        possession_team_id: Team currently holding the ball
        possession_arrow: Team entitled to the next jump-ball possession
        status: Lifecycle status
        quarter_length_seconds: Regulation period length
        overtime_length_seconds: Overtime period length
        rosters: On-court/bench partition keyed by team id
        last_action: Human-readable description of the last change
    """
    game_id: str = ""
    home_team_id: str = "home"
    away_team_id: str = "away"
    quarter: int = 1
    clock_seconds_remaining: int = DEFAULT_QUARTER_LENGTH_MIN * 60
    clock_running: bool = False
    shot_clock_seconds_remaining: int = SHOT_CLOCK_FULL
    shot_clock_running: bool = False
    shot_clock_visible: bool = True
    score_home: int = 0
    score_away: int = 0
    team_fouls_home: int = 0
    team_fouls_away: int = 0
    timeouts_remaining_home: int = DEFAULT_TIMEOUTS_PER_TEAM
    timeouts_remaining_away: int = DEFAULT_TIMEOUTS_PER_TEAM
    possession_team_id: Optional[str] = None
    possession_arrow: Optional[str] = None
    status: GameStatus = GameStatus.SCHEDULED
    quarter_length_seconds: int = DEFAULT_QUARTER_LENGTH_MIN * 60
    overtime_length_seconds: int = DEFAULT_OVERTIME_LENGTH_MIN * 60
    rosters: Dict[str, RosterState] = field(default_factory=dict)
    last_action: Optional[str] = None

    # ------------------------------------------------------------------
    # Team-side helpers
    # ------------------------------------------------------------------
    def side_for(self, team_id: str) -> str:
        """
        Resolve a team id to "home" or "away".

        Raises:
            ValueError: If the team does not play in this game
        """
        if team_id == self.home_team_id:
            return HOME
        if team_id == self.away_team_id:
            return AWAY
        raise ValueError(f"Team {team_id!r} is not playing in game {self.game_id!r}")

    def team_ids(self) -> tuple:
        return (self.home_team_id, self.away_team_id)

    def score_for(self, team_id: str) -> int:
        return getattr(self, f"score_{self.side_for(team_id)}")

    def add_score(self, team_id: str, points: int) -> None:
        side = self.side_for(team_id)
        setattr(self, f"score_{side}", getattr(self, f"score_{side}") + points)

    def fouls_for(self, team_id: str) -> int:
        return getattr(self, f"team_fouls_{self.side_for(team_id)}")

    def add_team_foul(self, team_id: str) -> None:
        side = self.side_for(team_id)
        setattr(self, f"team_fouls_{side}", getattr(self, f"team_fouls_{side}") + 1)

    def timeouts_for(self, team_id: str) -> int:
        return getattr(self, f"timeouts_remaining_{self.side_for(team_id)}")

    def use_timeout(self, team_id: str) -> None:
        side = self.side_for(team_id)
        setattr(self, f"timeouts_remaining_{side}", getattr(self, f"timeouts_remaining_{side}") - 1)

    @property
    def bonus_home(self) -> bool:
        """Home team has reached the team-foul threshold this period."""
        return self.team_fouls_home >= BONUS_FOUL_THRESHOLD

    @property
    def bonus_away(self) -> bool:
        """Away team has reached the team-foul threshold this period."""
        return self.team_fouls_away >= BONUS_FOUL_THRESHOLD

    def in_bonus(self, team_id: str) -> bool:
        return self.fouls_for(team_id) >= BONUS_FOUL_THRESHOLD

    @property
    def is_active(self) -> bool:
        return self.status == GameStatus.IN_PROGRESS

    @property
    def is_overtime(self) -> bool:
        return self.quarter > REGULATION_QUARTERS

    def period_length_for(self, quarter: int) -> int:
        """Length in seconds of the given period (regulation or overtime)."""
        return self.overtime_length_seconds if quarter > REGULATION_QUARTERS else self.quarter_length_seconds

    # ------------------------------------------------------------------
    # Snapshots & serialization
    # ------------------------------------------------------------------
    def copy(self) -> "GameState":
        """Return an independent snapshot of this state."""
        return GameState.from_json(self.to_json())

    def restore(self, snapshot: "GameState") -> None:
        """Overwrite this state in place with a copy of ``snapshot``.

        Services hold a reference to one GameState object, so snapshots are
        applied field by field instead of swapping the object.
        """
        source = snapshot.copy()
        for f in fields(self):
            setattr(self, f.name, getattr(source, f.name))

    def to_json(self) -> dict:
        """
        Convert GameState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "game_id": self.game_id,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "quarter": self.quarter,
            "clock_seconds_remaining": self.clock_seconds_remaining,
            "clock_running": self.clock_running,
            "shot_clock_seconds_remaining": self.shot_clock_seconds_remaining,
            "shot_clock_running": self.shot_clock_running,
            "shot_clock_visible": self.shot_clock_visible,
            "score_home": self.score_home,
            "score_away": self.score_away,
            "team_fouls_home": self.team_fouls_home,
            "team_fouls_away": self.team_fouls_away,
            "timeouts_remaining_home": self.timeouts_remaining_home,
            "timeouts_remaining_away": self.timeouts_remaining_away,
            "possession_team_id": self.possession_team_id,
            "possession_arrow": self.possession_arrow,
            "status": self.status.value,
            "quarter_length_seconds": self.quarter_length_seconds,
            "overtime_length_seconds": self.overtime_length_seconds,
            "rosters": {k: v.to_dict() for k, v in self.rosters.items()},
            "last_action": self.last_action,
        }

    @staticmethod
    def from_json(data: dict) -> "GameState":
        """
        Create GameState from JSON dictionary.

        Args:
            data: Dictionary with game state data

        Returns:
            New GameState instance
        """
        gs = GameState()
        gs.game_id = str(data.get("game_id", ""))
        gs.home_team_id = str(data.get("home_team_id", gs.home_team_id))
        gs.away_team_id = str(data.get("away_team_id", gs.away_team_id))
        gs.quarter = max(1, int(data.get("quarter", 1)))
        gs.quarter_length_seconds = int(data.get("quarter_length_seconds", gs.quarter_length_seconds))
        gs.overtime_length_seconds = int(data.get("overtime_length_seconds", gs.overtime_length_seconds))
        gs.clock_seconds_remaining = max(
            0, int(data.get("clock_seconds_remaining", gs.period_length_for(gs.quarter)))
        )
        gs.clock_running = bool(data.get("clock_running", False))
        gs.shot_clock_seconds_remaining = max(
            0, min(SHOT_CLOCK_MAX, int(data.get("shot_clock_seconds_remaining", SHOT_CLOCK_FULL)))
        )
        gs.shot_clock_running = bool(data.get("shot_clock_running", False))
        gs.shot_clock_visible = bool(data.get("shot_clock_visible", True))
        gs.score_home = max(0, int(data.get("score_home", 0)))
        gs.score_away = max(0, int(data.get("score_away", 0)))
        gs.team_fouls_home = max(0, int(data.get("team_fouls_home", 0)))
        gs.team_fouls_away = max(0, int(data.get("team_fouls_away", 0)))
        gs.timeouts_remaining_home = max(
            0, int(data.get("timeouts_remaining_home", DEFAULT_TIMEOUTS_PER_TEAM))
        )
        gs.timeouts_remaining_away = max(
            0, int(data.get("timeouts_remaining_away", DEFAULT_TIMEOUTS_PER_TEAM))
        )
        gs.possession_team_id = data.get("possession_team_id")
        gs.possession_arrow = data.get("possession_arrow")
        gs.status = GameStatus(data.get("status", GameStatus.SCHEDULED.value))
        gs.rosters = {
            str(team_id): RosterState.from_dict(roster)
            for team_id, roster in (data.get("rosters") or {}).items()
        }
        gs.last_action = data.get("last_action")
        return gs
