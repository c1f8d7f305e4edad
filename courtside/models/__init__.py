"""
Models package for the Courtside live tracker.

This package contains the core data models used throughout the application.
"""
from .player import PlayerRef, RosterState
from .stat_event import (
    StatType, StatAction, StatEvent, ShotLocation,
    ALLOWED_MODIFIERS, is_allowed_modifier, point_value
)
from .game_state import GameState, GameStatus

__all__ = [
    "PlayerRef", "RosterState", "StatType", "StatAction", "StatEvent",
    "ShotLocation", "ALLOWED_MODIFIERS", "is_allowed_modifier", "point_value",
    "GameState", "GameStatus"
]
