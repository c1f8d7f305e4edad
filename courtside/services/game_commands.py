"""
Undo support and command dispatch for live tracker actions.

The undo stack holds a single entry: only the most recently recorded action
can be taken back. The dispatcher turns named commands with JSON payloads
into engine calls so every view layer drives the engine the same way.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..models import GameState, PlayerRef, ShotLocation, StatAction, StatEvent, StatType
from ..utils import now_ts
from .errors import InvalidModifier, NothingToUndo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UndoEntry:
    """An undoable action: the event it produced and the state before it."""
    event: StatEvent
    prior_state: GameState
    timestamp: float

    @property
    def description(self) -> str:
        label = self.event.stat_type.value.replace("_", " ")
        return f"{label} {self.event.modifier}" if self.event.modifier else label


class UndoStack:
    """
    Single-slot undo stack.

    Pushing replaces whatever was there, so recording a new action discards
    the ability to undo the one before it.
    """

    def __init__(self):
        self._entry: Optional[UndoEntry] = None

    def push(self, event: StatEvent, prior_state: GameState) -> None:
        """
        Remember an action so it can be undone.

        Args:
            event: Event produced by the action
            prior_state: Snapshot of the game state before the action
        """
        self._entry = UndoEntry(event=event, prior_state=prior_state.copy(), timestamp=now_ts())

    def undo(self) -> UndoEntry:
        """
        Take the pending entry off the stack.

        Returns:
            The entry to revert

        Raises:
            NothingToUndo: If the stack is empty
        """
        if self._entry is None:
            raise NothingToUndo()
        entry, self._entry = self._entry, None
        return entry

    def peek(self) -> Optional[UndoEntry]:
        return self._entry

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self._entry is not None

    def clear(self) -> None:
        self._entry = None


# ----------------------------------------------------------------------
# Payload parsing
# ----------------------------------------------------------------------
def parse_player_ref(data: Any) -> Optional[PlayerRef]:
    """Accept {"player_id", "is_custom"}, a bare id string, or None."""
    if data is None or data == "":
        return None
    if isinstance(data, dict):
        return PlayerRef.from_dict(data)
    return PlayerRef(player_id=str(data))


def parse_stat_action(data: Dict[str, Any]) -> StatAction:
    """
    Build a StatAction from a JSON payload.

    Raises:
        InvalidModifier: If the stat type is unknown
        ValueError: If required fields are missing
    """
    team_id = data.get("team_id")
    if not team_id:
        raise ValueError("team_id is required")
    try:
        stat_type = StatType(data.get("stat_type"))
    except ValueError:
        raise InvalidModifier(f"Unknown stat type: {data.get('stat_type')!r}")

    location = data.get("shot_location")
    return StatAction(
        team_id=str(team_id),
        stat_type=stat_type,
        modifier=data.get("modifier") or None,
        player_ref=parse_player_ref(data.get("player")),
        is_opponent_stat=bool(data.get("is_opponent_stat", False)),
        shot_location=ShotLocation.from_dict(location) if location else None,
        substitute_in=parse_player_ref(data.get("substitute_in")),
    )


class GameCommandDispatcher:
    """
    Routes named commands to a game engine.

    Any view layer (HTTP, desktop, tests) can drive the engine through
    ``dispatch(name, payload)`` without knowing its internals.
    """

    def __init__(self, engine):
        self.engine = engine
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            "start_game": lambda p: engine.start_game(),
            "end_game": lambda p: engine.end_game(),
            "cancel_game": lambda p: engine.cancel_game(),
            "record": lambda p: engine.record(parse_stat_action(p)),
            "substitute": self._substitute,
            "undo": lambda p: engine.undo(),
            "clock_start": lambda p: engine.start_clock(),
            "clock_stop": lambda p: engine.stop_clock(),
            "clock_reset": lambda p: engine.reset_clock(p.get("seconds")),
            "clock_set": lambda p: engine.set_clock(int(p.get("minutes", 0)), int(p.get("seconds", 0))),
            "tick": lambda p: engine.tick(),
            "advance_quarter": lambda p: engine.advance_quarter(),
            "shot_clock_start": lambda p: engine.start_shot_clock(),
            "shot_clock_stop": lambda p: engine.stop_shot_clock(),
            "shot_clock_reset": lambda p: engine.reset_shot_clock(int(p.get("seconds", 24))),
            "shot_clock_set": lambda p: engine.set_shot_clock(int(p["seconds"])),
            "set_possession": lambda p: engine.set_possession(p["team_id"]),
            "set_arrow": lambda p: engine.set_arrow(p["team_id"]),
            "jump_ball": lambda p: engine.jump_ball(),
        }

    def _substitute(self, payload: Dict[str, Any]):
        player_out = parse_player_ref(payload.get("player_out"))
        player_in = parse_player_ref(payload.get("player_in"))
        if player_out is None or player_in is None:
            raise ValueError("player_out and player_in are required")
        return self.engine.substitute(payload.get("team_id"), player_out, player_in)

    def available_commands(self) -> List[str]:
        return sorted(self._handlers)

    def dispatch(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute a named command.

        Raises:
            KeyError: If the command name is unknown
            TrackerError: Whatever the engine raises for the command
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise KeyError(f"Unknown command: {name}")
        logger.debug("Dispatching %s", name)
        return handler(payload or {})
