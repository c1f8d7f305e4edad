"""
Error taxonomy for the live tracker.

Every validation failure is raised before any state is touched, so callers
can show the message and let the operator fix the input.
"""


class TrackerError(Exception):
    """Base class for live tracker failures."""
    code = "tracker_error"
    default_message = "Tracker operation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class NoPlayerSelected(TrackerError):
    code = "no_player_selected"
    default_message = "Select a player before recording a stat"


class ClockNotRunning(TrackerError):
    code = "clock_not_running"
    default_message = "Start the game clock before recording this stat"


class InvalidModifier(TrackerError):
    code = "invalid_modifier"
    default_message = "Stat type and modifier combination is not allowed"


class NoTimeoutsRemaining(TrackerError):
    code = "no_timeouts_remaining"
    default_message = "Team has no timeouts remaining"


class InvalidRosterOperation(TrackerError):
    code = "invalid_roster_operation"
    default_message = "Invalid roster operation"


class InsufficientRoster(TrackerError):
    code = "insufficient_roster"
    default_message = "Team needs at least 5 eligible players"


class NothingToUndo(TrackerError):
    code = "nothing_to_undo"
    default_message = "Nothing to undo"


class GameNotActive(TrackerError):
    code = "game_not_active"
    default_message = "Game is not in progress"


class PersistenceFailure(TrackerError):
    """Raised (or reported) when a stat could not be saved; never rolls back state."""
    code = "persistence_failure"
    default_message = "Stat may not have saved"

    def __init__(self, message: str = "", event_id: str = ""):
        super().__init__(message)
        self.event_id = event_id
