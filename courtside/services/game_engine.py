"""
Live game engine for the Courtside tracker.

One engine instance owns one game's state. Every command runs under a single
re-entrant lock so its effects land as one atomic step, then subscribers are
notified and new events are handed to the persistence dispatcher without
waiting for the write.
"""
import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional

from ..models import GameState, GameStatus, PlayerRef, StatAction, StatEvent, StatType
from ..utils import (
    MAX_QUARTER_LENGTH_MIN, MIN_QUARTER_LENGTH_MIN, PERSPECTIVE_TEAM_A_UP,
    SHOT_CLOCK_FULL, fmt_mmss, shot_clock_level
)
from .automation import AutomationFlags
from .clock_service import GameClockService, ShotClockService
from .errors import GameNotActive, PersistenceFailure
from .game_commands import UndoEntry, UndoStack
from .persistence_service import EventSink, PersistenceDispatcher
from .possession_service import PossessionService
from .roster_service import RosterProvider, RosterService
from .shot_location import map_tap, shot_type_for_zone
from .stat_recorder import RecordResult, StatRecorder

logger = logging.getLogger(__name__)

StateListener = Callable[[str, GameState], None]


class GameEngine:
    """
    Session-scoped engine for one live game.

    Wraps the clock, shot clock, possession, roster and stat services and
    gates everything on the game lifecycle:
    scheduled -> in_progress -> completed | cancelled.
    """

    def __init__(
        self,
        game_state: Optional[GameState] = None,
        event_sink: Optional[EventSink] = None,
        on_persistence_failure: Optional[Callable[[PersistenceFailure], None]] = None,
        persistence: Optional[PersistenceDispatcher] = None,
        opponent_team_id: Optional[str] = None,
        debounce_window: Optional[float] = None,
        automation: Optional[AutomationFlags] = None,
    ):
        """
        Initialize the engine.

        Args:
            game_state: State to drive (a fresh scheduled game by default)
            event_sink: Durable store for events; wrapped in a dispatcher
            on_persistence_failure: Called from the worker when a write fails
            persistence: Pre-built dispatcher, overrides event_sink
            opponent_team_id: Team tracked only through opponent stats (coach
                mode); it needs no roster to start the game
            debounce_window: Duplicate-tap window in seconds
            automation: Possession and clock follow-ups, all off by default
        """
        self.game_state = game_state or GameState()
        self.opponent_team_id = opponent_team_id
        self.undo_stack = UndoStack()
        self.clock = GameClockService(self.game_state)
        self.shot_clock = ShotClockService(self.game_state)
        self.possession = PossessionService(self.game_state)
        self.rosters = RosterService(self.game_state)
        recorder_options = {"automation": automation}
        if debounce_window is not None:
            recorder_options["debounce_window"] = debounce_window
        self.recorder = StatRecorder(self.game_state, self.rosters, self.undo_stack, **recorder_options)

        if persistence is None and event_sink is not None:
            persistence = PersistenceDispatcher(event_sink, on_failure=on_persistence_failure)
        self.persistence = persistence

        self._listeners: List[StateListener] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a state-changed listener.

        Args:
            listener: Called with (command name, state snapshot)

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, name: str) -> None:
        if not self._listeners:
            return
        snapshot = self.game_state.copy()
        for listener in list(self._listeners):
            try:
                listener(name, snapshot)
            except Exception:
                logger.exception("State listener failed for %s", name)

    def _run_command(self, name: str, operation: Callable, require_active: bool = True):
        with self._lock:
            if require_active:
                self._require_active(name)
            result = operation()
            self._notify(name)
            return result

    def _require_active(self, name: str) -> None:
        if not self.game_state.is_active:
            logger.debug("Rejected %s: game is %s", name, self.game_state.status.value)
            raise GameNotActive(f"Game is {self.game_state.status.value}; cannot {name.replace('_', ' ')}")

    # ------------------------------------------------------------------
    # Pre-game setup
    # ------------------------------------------------------------------
    def configure_game(
        self,
        *,
        quarter_length_minutes: Optional[int] = None,
        overtime_length_minutes: Optional[int] = None,
        timeouts_per_team: Optional[int] = None,
    ) -> None:
        """Configure period lengths and timeouts.

        Raises:
            ValueError: If the game has already started or values are invalid
        """

        def operation():
            state = self.game_state
            if state.status != GameStatus.SCHEDULED:
                raise ValueError("Cannot configure a game that has already started")
            if quarter_length_minutes is not None:
                if not MIN_QUARTER_LENGTH_MIN <= int(quarter_length_minutes) <= MAX_QUARTER_LENGTH_MIN:
                    raise ValueError(
                        f"Quarter length must be {MIN_QUARTER_LENGTH_MIN}-{MAX_QUARTER_LENGTH_MIN} minutes"
                    )
                state.quarter_length_seconds = int(quarter_length_minutes) * 60
                state.clock_seconds_remaining = state.period_length_for(state.quarter)
            if overtime_length_minutes is not None:
                if int(overtime_length_minutes) < MIN_QUARTER_LENGTH_MIN:
                    raise ValueError("Overtime length must be at least one minute")
                state.overtime_length_seconds = int(overtime_length_minutes) * 60
            if timeouts_per_team is not None:
                if int(timeouts_per_team) < 0:
                    raise ValueError("Timeouts per team cannot be negative")
                state.timeouts_remaining_home = int(timeouts_per_team)
                state.timeouts_remaining_away = int(timeouts_per_team)

        self._run_command("configure_game", operation, require_active=False)

    def load_team(self, team_id: str, eligible: Iterable[PlayerRef], starters: Iterable[PlayerRef]) -> None:
        """Load one team's eligible players and starting five before tip-off."""

        def operation():
            if self.game_state.status != GameStatus.SCHEDULED:
                raise ValueError("Rosters can only be loaded before the game starts")
            self.rosters.load_team(team_id, eligible, starters)

        self._run_command("load_team", operation, require_active=False)

    def load_rosters(self, provider: RosterProvider, starters: Dict[str, Iterable[PlayerRef]]) -> None:
        """Query the roster collaborator for each team and load it with its starters."""
        for team_id, team_starters in starters.items():
            self.load_team(team_id, provider.eligible_players(team_id), team_starters)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start_game(self) -> GameState:
        """
        Move a scheduled game to in_progress.

        Raises:
            GameNotActive: If the game is not scheduled
            InsufficientRoster, InvalidRosterOperation: If a team cannot take the floor
        """

        def operation():
            state = self.game_state
            if state.status != GameStatus.SCHEDULED:
                raise GameNotActive(f"Game is {state.status.value}; it cannot be started")
            for team_id in state.team_ids():
                if team_id == self.opponent_team_id:
                    continue
                self.rosters.validate_ready(team_id)
            state.status = GameStatus.IN_PROGRESS
            state.last_action = "Game started"
            logger.info("Game %s started", state.game_id)
            return state.copy()

        return self._run_command("start_game", operation, require_active=False)

    def end_game(self) -> GameState:
        """Mark the game completed. Terminal."""
        return self._finish(GameStatus.COMPLETED, "end_game", "Game ended")

    def cancel_game(self) -> GameState:
        """Cancel a scheduled or in-progress game. Terminal."""

        def operation():
            state = self.game_state
            if state.status not in (GameStatus.SCHEDULED, GameStatus.IN_PROGRESS):
                raise GameNotActive(f"Game is {state.status.value}; it cannot be cancelled")
            return self._close(GameStatus.CANCELLED, "Game cancelled")

        return self._run_command("cancel_game", operation, require_active=False)

    def _finish(self, status: GameStatus, name: str, message: str) -> GameState:
        return self._run_command(name, lambda: self._close(status, message))

    def _close(self, status: GameStatus, message: str) -> GameState:
        state = self.game_state
        state.status = status
        state.clock_running = False
        state.shot_clock_running = False
        state.last_action = message
        self.undo_stack.clear()
        self.recorder.clear_debounce()
        logger.info("Game %s is now %s", state.game_id, status.value)
        return state.copy()

    @property
    def status(self) -> GameStatus:
        return self.game_state.status

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------
    def record(self, action: StatAction) -> RecordResult:
        """Validate and apply a stat action, then hand the event to persistence."""

        def operation():
            result = self.recorder.record(action)
            if not result.duplicate and self.persistence is not None:
                self.persistence.persist(result.event)
            return result

        return self._run_command("record", operation)

    def substitute(self, team_id: str, player_out: PlayerRef, player_in: PlayerRef) -> RecordResult:
        """Swap a player on court for one on the bench; recorded as a substitution event."""
        return self.record(StatAction(
            team_id=team_id,
            stat_type=StatType.SUBSTITUTION,
            player_ref=player_out,
            substitute_in=player_in,
        ))

    def call_timeout(self, team_id: str, timeout_type: Optional[str] = None) -> RecordResult:
        """Charge a timeout to a team; stops both clocks."""
        return self.record(StatAction(team_id=team_id, stat_type=StatType.TIMEOUT, modifier=timeout_type))

    def record_shot_from_tap(
        self,
        team_id: str,
        player_ref: Optional[PlayerRef],
        made: bool,
        pixel_x: float,
        pixel_y: float,
        container_width: float,
        container_height: float,
        perspective: str = PERSPECTIVE_TEAM_A_UP,
        is_opponent_stat: bool = False,
    ) -> RecordResult:
        """Record a field goal or three whose type is inferred from the tapped zone."""
        location = map_tap(pixel_x, pixel_y, container_width, container_height, perspective)
        return self.record(StatAction(
            team_id=team_id,
            stat_type=shot_type_for_zone(location.zone),
            modifier="made" if made else "missed",
            player_ref=player_ref,
            is_opponent_stat=is_opponent_stat,
            shot_location=location,
        ))

    def undo(self) -> UndoEntry:
        """
        Revert the most recent recorded action.

        Raises:
            GameNotActive: If the game is over
            NothingToUndo: If there is nothing to revert
        """

        def operation():
            entry = self.undo_stack.undo()
            self.game_state.restore(entry.prior_state)
            self.recorder.forget_event(entry.event.id)
            self.recorder.clear_debounce()
            if self.persistence is not None:
                self.persistence.delete(entry.event)
            logger.info("Undid %s (event %s)", entry.description, entry.event.id)
            return entry

        return self._run_command("undo", operation)

    def can_undo(self) -> bool:
        return self.game_state.is_active and self.undo_stack.can_undo()

    @property
    def events(self) -> List[StatEvent]:
        return list(self.recorder.events)

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def start_clock(self) -> None:
        self._run_command("start_clock", self.clock.start)

    def stop_clock(self) -> None:
        self._run_command("stop_clock", self.clock.stop)

    def reset_clock(self, to_seconds: Optional[int] = None) -> None:
        self._run_command("reset_clock", lambda: self.clock.reset(to_seconds))

    def set_clock(self, minutes: int, seconds: int) -> None:
        self._run_command("set_clock", lambda: self.clock.set_custom(minutes, seconds))

    def tick(self) -> None:
        """One second of wall time: ticks each running clock independently."""

        def operation():
            self.clock.tick()
            self.shot_clock.tick()

        self._run_command("tick", operation)

    def tick_shot_clock(self) -> None:
        self._run_command("tick_shot_clock", self.shot_clock.tick)

    def advance_quarter(self) -> int:
        return self._run_command("advance_quarter", self.clock.advance_quarter)

    def reset_team_fouls(self) -> None:
        self._run_command("reset_team_fouls", self.clock.reset_team_fouls)

    # ------------------------------------------------------------------
    # Shot clock
    # ------------------------------------------------------------------
    def start_shot_clock(self) -> None:
        self._run_command("start_shot_clock", self.shot_clock.start)

    def stop_shot_clock(self) -> None:
        self._run_command("stop_shot_clock", self.shot_clock.stop)

    def reset_shot_clock(self, to_seconds: int = SHOT_CLOCK_FULL) -> None:
        self._run_command("reset_shot_clock", lambda: self.shot_clock.reset(to_seconds))

    def set_shot_clock(self, seconds: int) -> None:
        self._run_command("set_shot_clock", lambda: self.shot_clock.set_time(seconds))

    def set_shot_clock_visible(self, visible: bool) -> None:
        self._run_command("set_shot_clock_visible", lambda: self.shot_clock.set_visible(visible))

    # ------------------------------------------------------------------
    # Possession
    # ------------------------------------------------------------------
    def set_possession(self, team_id: str) -> None:
        self._run_command("set_possession", lambda: self.possession.set_possession(team_id))

    def set_arrow(self, team_id: str) -> None:
        self._run_command("set_arrow", lambda: self.possession.set_arrow(team_id))

    def flip_arrow(self) -> Optional[str]:
        return self._run_command("flip_arrow", self.possession.flip_arrow)

    def jump_ball(self) -> Optional[str]:
        """Give the ball to the arrow team and flip the arrow."""
        return self._run_command("jump_ball", self.possession.resolve_jump_ball)

    # ------------------------------------------------------------------
    # Inbound corrections
    # ------------------------------------------------------------------
    def apply_authoritative_snapshot(
        self,
        snapshot: GameState,
        events: Optional[Iterable[StatEvent]] = None,
    ) -> GameState:
        """
        Replace live state with a snapshot recomputed by the correction tool.

        Undo history and the duplicate-tap memory are dropped since they refer
        to state that no longer exists.

        Raises:
            GameNotActive: If the game is no longer in progress
        """

        def operation():
            self.game_state.restore(snapshot)
            self.undo_stack.clear()
            if events is not None:
                self.recorder.reset_log(list(events))
            else:
                self.recorder.clear_debounce()
            logger.info("Applied authoritative snapshot for game %s", self.game_state.game_id)
            return self.game_state.copy()

        return self._run_command("apply_snapshot", operation)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def state_snapshot(self) -> GameState:
        with self._lock:
            return self.game_state.copy()

    def bonus(self, team_id: str) -> bool:
        return self.game_state.in_bonus(team_id)

    def display(self) -> dict:
        """Display-ready values for scoreboards."""
        state = self.game_state
        return {
            "clock": fmt_mmss(state.clock_seconds_remaining),
            "shot_clock": state.shot_clock_seconds_remaining,
            "shot_clock_level": shot_clock_level(state.shot_clock_seconds_remaining),
            "shot_clock_visible": state.shot_clock_visible,
            "quarter": state.quarter,
            "is_overtime": state.is_overtime,
            "bonus_home": state.bonus_home,
            "bonus_away": state.bonus_away,
            "jump_ball": self.possession.jump_ball_indicator(),
        }
