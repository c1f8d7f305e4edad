"""
Player and roster models for the Courtside live tracker.

A player is referenced either as a platform-wide account or as a team-scoped
"custom" player. The two kinds are never conflated, so the reference carries
an explicit tag alongside the id.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Set


@dataclass(frozen=True)
class PlayerRef:
    """Reference to a regular or custom player."""
    player_id: str
    is_custom: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"player_id": self.player_id, "is_custom": self.is_custom}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerRef':
        """Create from dictionary for JSON deserialization."""
        return cls(
            player_id=str(data["player_id"]),
            is_custom=bool(data.get("is_custom", False)),
        )

    def __str__(self) -> str:
        prefix = "custom" if self.is_custom else "player"
        return f"{prefix}:{self.player_id}"


def _sorted_refs(refs: Iterable[PlayerRef]) -> List[PlayerRef]:
    return sorted(refs, key=lambda ref: (ref.is_custom, ref.player_id))


@dataclass
class RosterState:
    """
    On-court / bench partition of one team's eligible players.
    
    Attributes:
        team_id: Team the roster belongs to
        on_court: Players currently on the floor
        bench: Eligible players not on the floor
    """
    team_id: str
    on_court: Set[PlayerRef] = field(default_factory=set)
    bench: Set[PlayerRef] = field(default_factory=set)

    @property
    def eligible(self) -> Set[PlayerRef]:
        """All players eligible for this game."""
        return self.on_court | self.bench

    def copy(self) -> 'RosterState':
        return RosterState(team_id=self.team_id, on_court=set(self.on_court), bench=set(self.bench))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "team_id": self.team_id,
            "on_court": [ref.to_dict() for ref in _sorted_refs(self.on_court)],
            "bench": [ref.to_dict() for ref in _sorted_refs(self.bench)],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RosterState':
        """Create from dictionary for JSON deserialization."""
        return cls(
            team_id=str(data["team_id"]),
            on_court={PlayerRef.from_dict(item) for item in data.get("on_court", [])},
            bench={PlayerRef.from_dict(item) for item in data.get("bench", [])},
        )
