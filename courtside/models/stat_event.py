"""
Stat event model for the Courtside live tracker.

This module defines the stat vocabulary, the allowed stat/modifier pairs,
the operator action accepted by the recorder and the immutable event it
produces.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from .player import PlayerRef


class StatType(Enum):
    """Kinds of stat events the live tracker records."""
    FIELD_GOAL = "field_goal"
    THREE_POINTER = "three_pointer"
    FREE_THROW = "free_throw"
    REBOUND = "rebound"
    ASSIST = "assist"
    STEAL = "steal"
    BLOCK = "block"
    TURNOVER = "turnover"
    FOUL = "foul"
    TIMEOUT = "timeout"
    SUBSTITUTION = "substitution"


SHOT_MODIFIERS = frozenset({"made", "missed"})
REBOUND_MODIFIERS = frozenset({"offensive", "defensive"})
FOUL_MODIFIERS = frozenset({"personal", "technical"})
TURNOVER_MODIFIERS = frozenset({
    "bad_pass", "travel", "offensive_foul", "steal", "double_dribble",
    "lost_ball", "out_of_bounds", "shot_clock_violation",
})
TIMEOUT_MODIFIERS = frozenset({"full", "30_second"})

# None in a set means "no modifier" is accepted
ALLOWED_MODIFIERS: Dict[StatType, FrozenSet[Optional[str]]] = {
    StatType.FIELD_GOAL: SHOT_MODIFIERS,
    StatType.THREE_POINTER: SHOT_MODIFIERS,
    StatType.FREE_THROW: SHOT_MODIFIERS,
    StatType.REBOUND: REBOUND_MODIFIERS,
    StatType.ASSIST: frozenset({None}),
    StatType.STEAL: frozenset({None}),
    StatType.BLOCK: frozenset({None}),
    StatType.TURNOVER: TURNOVER_MODIFIERS,
    StatType.FOUL: FOUL_MODIFIERS,
    StatType.TIMEOUT: TIMEOUT_MODIFIERS | {None},
    StatType.SUBSTITUTION: frozenset({None}),
}

POINT_VALUES = {
    StatType.FIELD_GOAL: 2,
    StatType.THREE_POINTER: 3,
    StatType.FREE_THROW: 1,
}

SHOT_TYPES = frozenset({StatType.FIELD_GOAL, StatType.THREE_POINTER})


def is_allowed_modifier(stat_type: StatType, modifier: Optional[str]) -> bool:
    """Return True when the stat/modifier pair is one the tracker accepts."""
    return modifier in ALLOWED_MODIFIERS[stat_type]


def point_value(stat_type: StatType, modifier: Optional[str]) -> int:
    """Points a stat contributes to its team's score."""
    if modifier != "made":
        return 0
    return POINT_VALUES.get(stat_type, 0)


@dataclass(frozen=True)
class ShotLocation:
    """Normalized court position (0-100 on both axes) and the zone it falls in."""
    x: float
    y: float
    zone: str

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "zone": self.zone}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShotLocation':
        return cls(x=float(data["x"]), y=float(data["y"]), zone=str(data["zone"]))


@dataclass(frozen=True)
class StatAction:
    """
    An operator action submitted to the stat recorder.
    
    Attributes:
        team_id: Team the action is attributed to
        stat_type: Kind of stat
        modifier: Outcome or subtype (made/missed, offensive/defensive, ...)
        player_ref: Acting player, None for opponent or team actions
        is_opponent_stat: Coach-mode bookkeeping for an untracked opponent
        shot_location: Court position for field goals and threes
        substitute_in: Incoming player when stat_type is substitution
    """
    team_id: str
    stat_type: StatType
    modifier: Optional[str] = None
    player_ref: Optional[PlayerRef] = None
    is_opponent_stat: bool = False
    shot_location: Optional[ShotLocation] = None
    substitute_in: Optional[PlayerRef] = None

    @property
    def dedupe_key(self) -> tuple:
        return (self.team_id, self.player_ref, self.is_opponent_stat, self.stat_type, self.modifier)

    def describe(self) -> str:
        label = self.stat_type.value.replace("_", " ")
        return f"{label} {self.modifier}" if self.modifier else label


@dataclass(frozen=True)
class StatEvent:
    """Immutable record of one accepted action."""
    id: str
    game_id: str
    team_id: str
    player_ref: Optional[PlayerRef]
    stat_type: StatType
    modifier: Optional[str]
    value: int
    quarter: int
    clock_minutes_snapshot: int
    clock_seconds_snapshot: int
    created_at: float
    is_opponent_stat: bool = False
    shot_location: Optional[ShotLocation] = None
    substitute_in: Optional[PlayerRef] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the persistence port."""
        return {
            "id": self.id,
            "game_id": self.game_id,
            "team_id": self.team_id,
            "player_ref": self.player_ref.to_dict() if self.player_ref else None,
            "is_opponent_stat": self.is_opponent_stat,
            "stat_type": self.stat_type.value,
            "modifier": self.modifier,
            "value": self.value,
            "quarter": self.quarter,
            "clock_minutes_snapshot": self.clock_minutes_snapshot,
            "clock_seconds_snapshot": self.clock_seconds_snapshot,
            "shot_location": self.shot_location.to_dict() if self.shot_location else None,
            "substitute_in": self.substitute_in.to_dict() if self.substitute_in else None,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StatEvent':
        """Create from dictionary, the inverse of to_dict."""
        player = data.get("player_ref")
        location = data.get("shot_location")
        incoming = data.get("substitute_in")
        return cls(
            id=str(data["id"]),
            game_id=str(data["game_id"]),
            team_id=str(data["team_id"]),
            player_ref=PlayerRef.from_dict(player) if player else None,
            stat_type=StatType(data["stat_type"]),
            modifier=data.get("modifier"),
            value=int(data.get("value", 0)),
            quarter=int(data["quarter"]),
            clock_minutes_snapshot=int(data["clock_minutes_snapshot"]),
            clock_seconds_snapshot=int(data["clock_seconds_snapshot"]),
            created_at=float(data["created_at"]),
            is_opponent_stat=bool(data.get("is_opponent_stat", False)),
            shot_location=ShotLocation.from_dict(location) if location else None,
            substitute_in=PlayerRef.from_dict(incoming) if incoming else None,
        )
