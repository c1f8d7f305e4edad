"""
Service Factory for wiring a live game.

This module creates engines, sessions and dispatchers with their
collaborators injected, so the web layer and tests build games the same way.
"""
from typing import Callable, Optional

from ..models import GameState
from .automation import AutomationFlags
from .errors import PersistenceFailure
from .game_commands import GameCommandDispatcher
from .game_engine import GameEngine
from .persistence_service import EventSink, InMemoryEventStore, PersistenceDispatcher
from .session import TrackerSession


class ServiceFactory:
    """
    Factory for creating live-game services with shared collaborators.

    The event sink is created once per factory and shared by every engine it
    builds unless a custom sink is configured.
    """

    def __init__(self, event_sink: Optional[EventSink] = None):
        """Initialize factory with an optional event sink."""
        self._event_sink: Optional[EventSink] = event_sink
        self._failure_handler: Optional[Callable[[PersistenceFailure], None]] = None

    def create_engine(
        self,
        game_state: Optional[GameState] = None,
        opponent_team_id: Optional[str] = None,
        automation: Optional[AutomationFlags] = None,
    ) -> GameEngine:
        """
        Create a GameEngine with a persistence dispatcher attached.

        Args:
            game_state: Game to drive; a new scheduled game when omitted
            opponent_team_id: Team tracked through opponent stats only
            automation: Possession and clock follow-ups to switch on

        Returns:
            Configured GameEngine instance
        """
        dispatcher = PersistenceDispatcher(self._get_event_sink(), on_failure=self._failure_handler)
        return GameEngine(
            game_state=game_state,
            persistence=dispatcher,
            opponent_team_id=opponent_team_id,
            automation=automation,
        )

    def create_session(self, engine: GameEngine) -> TrackerSession:
        return TrackerSession(engine)

    def create_dispatcher(self, engine: GameEngine) -> GameCommandDispatcher:
        return GameCommandDispatcher(engine)

    def create_complete_service_suite(
        self,
        game_state: Optional[GameState] = None,
        opponent_team_id: Optional[str] = None,
        automation: Optional[AutomationFlags] = None,
    ) -> dict:
        """
        Create an engine plus the session and dispatcher bound to it.

        Returns:
            Dictionary containing all configured services
        """
        engine = self.create_engine(game_state, opponent_team_id=opponent_team_id, automation=automation)
        return {
            'engine': engine,
            'session': self.create_session(engine),
            'dispatcher': self.create_dispatcher(engine),
            'event_sink': self._get_event_sink(),
        }

    def _get_event_sink(self) -> EventSink:
        """Get singleton event sink."""
        if self._event_sink is None:
            self._event_sink = InMemoryEventStore()
        return self._event_sink

    def configure_event_sink(self, sink: EventSink) -> None:
        self._event_sink = sink

    def configure_failure_handler(self, handler: Callable[[PersistenceFailure], None]) -> None:
        self._failure_handler = handler
