"""
Stat recorder for the Courtside live tracker.

Validates operator actions against the clock and rosters, applies their
score/foul/timeout side effects in one step, appends the resulting event and
makes it undoable.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..models import (
    GameState, StatAction, StatEvent, StatType, is_allowed_modifier, point_value
)
from ..models.stat_event import SHOT_TYPES
from ..utils import BONUS_FOUL_THRESHOLD, DEBOUNCE_WINDOW_SECONDS, now_ts, split_mmss
from .errors import (
    ClockNotRunning, GameNotActive, InvalidModifier, InvalidRosterOperation,
    NoPlayerSelected, NoTimeoutsRemaining, TrackerError
)
from .automation import AutomationFlags, AutomationService
from .game_commands import UndoStack
from .roster_service import RosterService

logger = logging.getLogger(__name__)


def allowed_while_clock_stopped(stat_type: StatType, modifier: Optional[str]) -> bool:
    """
    Dead-ball actions the clock does not need to be running for.

    Made free throws are exempt; missed free throws are not.
    """
    if stat_type == StatType.FREE_THROW:
        return modifier == "made"
    return stat_type in (StatType.SUBSTITUTION, StatType.TIMEOUT)


@dataclass(frozen=True)
class RecordResult:
    """Outcome of a record call: the new state and the event to persist."""
    state: GameState
    event: StatEvent
    duplicate: bool = False


class StatRecorder:
    """Validates and applies stat actions against one GameState."""

    def __init__(
        self,
        game_state: GameState,
        roster_service: RosterService,
        undo_stack: UndoStack,
        debounce_window: float = DEBOUNCE_WINDOW_SECONDS,
        automation: Optional[AutomationFlags] = None,
    ):
        self.game_state = game_state
        self.roster_service = roster_service
        self.undo_stack = undo_stack
        self.debounce_window = debounce_window
        self.events: List[StatEvent] = []
        self.automation = AutomationService(game_state, automation or AutomationFlags())
        # dedupe key -> (accepted at, event)
        self._recent: Dict[tuple, Tuple[float, StatEvent]] = {}

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate(self, action: StatAction) -> None:
        """
        Check an action without applying it.

        Raises:
            GameNotActive, NoPlayerSelected, ClockNotRunning, InvalidModifier,
            InvalidRosterOperation, NoTimeoutsRemaining
        """
        state = self.game_state
        if not state.is_active:
            raise GameNotActive(f"Game is {state.status.value}; stats cannot be recorded")
        state.side_for(action.team_id)

        # Timeouts are called by the team, not by a player
        if action.stat_type != StatType.TIMEOUT:
            if action.player_ref is None and not action.is_opponent_stat:
                raise NoPlayerSelected()

        if not state.clock_running and not allowed_while_clock_stopped(action.stat_type, action.modifier):
            raise ClockNotRunning(
                f"Start the game clock before recording {action.describe()}"
            )

        if not is_allowed_modifier(action.stat_type, action.modifier):
            raise InvalidModifier(
                f"Modifier {action.modifier!r} is not allowed for {action.stat_type.value}"
            )
        if action.shot_location is not None and action.stat_type not in SHOT_TYPES:
            raise InvalidModifier("Shot location is only recorded for field goals and threes")

        if action.player_ref is not None and not action.is_opponent_stat:
            if not self.roster_service.is_eligible(action.team_id, action.player_ref):
                raise InvalidRosterOperation(
                    f"{action.player_ref} is not on the roster of team {action.team_id}"
                )

        if action.stat_type == StatType.TIMEOUT and state.timeouts_for(action.team_id) <= 0:
            raise NoTimeoutsRemaining(f"Team {action.team_id} has no timeouts remaining")

        if action.stat_type == StatType.SUBSTITUTION:
            if action.is_opponent_stat or action.substitute_in is None:
                raise InvalidRosterOperation("Substitutions need a player going out and a player coming in")
            self.roster_service.check_substitution(action.team_id, action.player_ref, action.substitute_in)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record(self, action: StatAction) -> RecordResult:
        """
        Validate and apply an action.

        Args:
            action: The operator action

        Returns:
            RecordResult with a snapshot of the new state and the new event.
            A repeat of any action accepted inside the debounce window returns
            that earlier event with ``duplicate=True`` and changes nothing.
        """
        if not self.game_state.is_active:
            raise GameNotActive(f"Game is {self.game_state.status.value}; stats cannot be recorded")

        current_time = now_ts()
        earlier = self._recent_duplicate(action, current_time)
        if earlier is not None:
            logger.debug("Ignoring duplicate %s within debounce window", action.describe())
            return RecordResult(state=self.game_state.copy(), event=earlier, duplicate=True)

        try:
            self.validate(action)
        except TrackerError as e:
            logger.debug("Rejected %s for %s: %s", action.describe(), action.team_id, e.code)
            raise

        prior_state = self.game_state.copy()
        event = self._build_event(action, current_time)
        self._apply_effects(action, event)
        self.game_state.last_action = self._describe(action)

        self.events.append(event)
        self.undo_stack.push(event, prior_state)
        self._recent[action.dedupe_key] = (current_time, event)

        logger.info(
            "Recorded %s for %s (%s-%s)", action.describe(), action.team_id,
            self.game_state.score_home, self.game_state.score_away,
        )
        return RecordResult(state=self.game_state.copy(), event=event)

    def forget_event(self, event_id: str) -> Optional[StatEvent]:
        """Drop an event from the live log (after undo)."""
        for idx, event in enumerate(self.events):
            if event.id == event_id:
                return self.events.pop(idx)
        return None

    def reset_log(self, events: Optional[List[StatEvent]] = None) -> None:
        self.events = list(events or [])
        self.clear_debounce()

    def clear_debounce(self) -> None:
        self._recent.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _recent_duplicate(self, action: StatAction, current_time: float) -> Optional[StatEvent]:
        """Earlier event for the same key inside the window, pruning expired keys."""
        self._recent = {
            key: (ts, event) for key, (ts, event) in self._recent.items()
            if 0 <= current_time - ts < self.debounce_window
        }
        hit = self._recent.get(action.dedupe_key)
        return hit[1] if hit else None

    def _build_event(self, action: StatAction, current_time: float) -> StatEvent:
        minutes, seconds = split_mmss(self.game_state.clock_seconds_remaining)
        return StatEvent(
            id=uuid.uuid4().hex,
            game_id=self.game_state.game_id,
            team_id=action.team_id,
            player_ref=None if action.is_opponent_stat else action.player_ref,
            stat_type=action.stat_type,
            modifier=action.modifier,
            value=point_value(action.stat_type, action.modifier),
            quarter=self.game_state.quarter,
            clock_minutes_snapshot=minutes,
            clock_seconds_snapshot=seconds,
            created_at=current_time,
            is_opponent_stat=action.is_opponent_stat,
            shot_location=action.shot_location,
            substitute_in=action.substitute_in,
        )

    def _apply_effects(self, action: StatAction, event: StatEvent) -> None:
        state = self.game_state
        if event.value:
            state.add_score(action.team_id, event.value)
        elif action.stat_type == StatType.FOUL:
            state.add_team_foul(action.team_id)
            if state.fouls_for(action.team_id) == BONUS_FOUL_THRESHOLD:
                logger.info("Team %s reached the bonus", action.team_id)
        elif action.stat_type == StatType.TIMEOUT:
            state.use_timeout(action.team_id)
            state.clock_running = False
            state.shot_clock_running = False
        elif action.stat_type == StatType.SUBSTITUTION:
            self.roster_service.substitute(action.team_id, action.player_ref, action.substitute_in)
        self.automation.after_event(event)

    @staticmethod
    def _describe(action: StatAction) -> str:
        if action.stat_type == StatType.SUBSTITUTION:
            return f"Substitution: {action.player_ref} -> {action.substitute_in}"
        who = "Opponent" if action.is_opponent_stat else (str(action.player_ref) if action.player_ref else action.team_id)
        return f"{who}: {action.describe()} recorded"
