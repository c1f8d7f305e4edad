"""
Services package for the Courtside live tracker.

This package contains the clock, roster, possession and stat services, the
game engine that wraps them, and the persistence ports.
"""
from .errors import (
    TrackerError, NoPlayerSelected, ClockNotRunning, InvalidModifier,
    NoTimeoutsRemaining, InvalidRosterOperation, InsufficientRoster,
    NothingToUndo, GameNotActive, PersistenceFailure
)
from .clock_service import GameClockService, ShotClockService
from .shot_location import map_tap, detect_zone
from .possession_service import PossessionService
from .automation import AutomationFlags, AutomationService
from .roster_service import RosterService, RosterProvider, StaticRosterProvider
from .game_commands import UndoStack, UndoEntry, GameCommandDispatcher
from .stat_recorder import StatRecorder, RecordResult
from .persistence_service import (
    PersistenceService, PersistenceDispatcher, InMemoryEventStore, JsonFileEventStore
)
from .game_engine import GameEngine
from .session import TrackerSession
from .service_factory import ServiceFactory

__all__ = [
    "TrackerError", "NoPlayerSelected", "ClockNotRunning", "InvalidModifier",
    "NoTimeoutsRemaining", "InvalidRosterOperation", "InsufficientRoster",
    "NothingToUndo", "GameNotActive", "PersistenceFailure",
    "GameClockService", "ShotClockService", "map_tap", "detect_zone",
    "PossessionService", "AutomationFlags", "AutomationService",
    "RosterService", "RosterProvider", "StaticRosterProvider",
    "UndoStack", "UndoEntry", "GameCommandDispatcher", "StatRecorder", "RecordResult",
    "PersistenceService", "PersistenceDispatcher", "InMemoryEventStore",
    "JsonFileEventStore", "GameEngine", "TrackerSession", "ServiceFactory"
]
