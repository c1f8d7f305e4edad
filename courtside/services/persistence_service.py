"""
Persistence service for the Courtside live tracker.

This module holds the outbound persistence port (event sinks), the
fire-and-forget dispatcher the engine hands events to, and helpers for
saving and loading a full game snapshot to/from JSON files.
"""
import json
import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Protocol

from ..models import GameState, StatEvent
from .errors import PersistenceFailure

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Outbound port: durable storage for stat events."""

    def persist_event(self, event: StatEvent) -> None:
        """Store an event. Must be idempotent on ``event.id``."""
        ...

    def delete_event(self, event_id: str) -> None:
        """Remove an event (used by undo). Unknown ids are ignored."""
        ...


class InMemoryEventStore:
    """Event sink keeping events in a dict keyed by id."""

    def __init__(self):
        self._events: Dict[str, StatEvent] = {}
        self._lock = threading.Lock()

    def persist_event(self, event: StatEvent) -> None:
        with self._lock:
            self._events[event.id] = event

    def delete_event(self, event_id: str) -> None:
        with self._lock:
            self._events.pop(event_id, None)

    def get(self, event_id: str) -> Optional[StatEvent]:
        return self._events.get(event_id)

    def all_events(self) -> List[StatEvent]:
        with self._lock:
            return sorted(self._events.values(), key=lambda e: e.created_at)

    def __len__(self) -> int:
        return len(self._events)


class JsonFileEventStore:
    """
    Event sink writing one JSON document per game.

    Events are keyed by id, so persisting the same event twice leaves a
    single copy on disk.
    """

    def __init__(self, directory: str = "game_events"):
        self.directory = directory
        self._lock = threading.Lock()

    def _path_for(self, game_id: str) -> str:
        return os.path.join(self.directory, f"game_{game_id or 'unsaved'}_events.json")

    def _read(self, path: str) -> Dict[str, dict]:
        if not os.path.exists(path):
            return {}
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f).get("events", {})

    def _write(self, path: str, events: Dict[str, dict]) -> None:
        directory = os.path.dirname(path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"events": events}, f, indent=2)
        os.replace(tmp_path, path)

    def persist_event(self, event: StatEvent) -> None:
        path = self._path_for(event.game_id)
        with self._lock:
            events = self._read(path)
            events[event.id] = event.to_dict()
            self._write(path, events)

    def delete_event(self, event_id: str, game_id: Optional[str] = None) -> None:
        with self._lock:
            paths = [self._path_for(game_id)] if game_id is not None else self._all_paths()
            for path in paths:
                events = self._read(path)
                if events.pop(event_id, None) is not None:
                    self._write(path, events)

    def load_events(self, game_id: str) -> List[StatEvent]:
        """Return a game's stored events ordered by creation time."""
        with self._lock:
            raw = self._read(self._path_for(game_id))
        events = [StatEvent.from_dict(data) for data in raw.values()]
        return sorted(events, key=lambda e: e.created_at)

    def _all_paths(self) -> List[str]:
        if not os.path.isdir(self.directory):
            return []
        return [
            os.path.join(self.directory, name)
            for name in os.listdir(self.directory)
            if name.endswith("_events.json")
        ]


class PersistenceDispatcher:
    """
    Hands events to a sink without blocking the caller.

    Writes run on a single background worker in submission order. A failed
    write is logged and reported through ``on_failure`` as a
    PersistenceFailure; the in-memory game state is never rolled back.
    Retrying is left to the sink or the operator.
    """

    def __init__(
        self,
        sink: EventSink,
        on_failure: Optional[Callable[[PersistenceFailure], None]] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.sink = sink
        self.on_failure = on_failure
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="persist")
        self._pending: List[Future] = []
        self._pending_lock = threading.Lock()
        self.failures: List[PersistenceFailure] = []

    def persist(self, event: StatEvent) -> Future:
        message = f"Stat {event.stat_type.value} may not have saved"
        return self._submit(self.sink.persist_event, event, event.id, message)

    def delete(self, event: StatEvent) -> Future:
        message = f"Undo of {event.stat_type.value} may not have saved"
        return self._submit(self.sink.delete_event, event.id, event.id, message)

    def _submit(self, operation: Callable, argument, event_id: str, message: str) -> Future:
        future = self._executor.submit(self._run, operation, argument, event_id, message)
        with self._pending_lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        return future

    def _run(self, operation: Callable, argument, event_id: str, message: str) -> None:
        try:
            operation(argument)
        except Exception as e:
            logger.warning("%s (event %s): %s", message, event_id, e)
            failure = PersistenceFailure(message, event_id=event_id)
            self.failures.append(failure)
            if self.on_failure is not None:
                try:
                    self.on_failure(failure)
                except Exception:
                    logger.exception("Persistence failure callback raised")

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until all submitted writes have finished (tests, shutdown)."""
        with self._pending_lock:
            pending = list(self._pending)
        for future in pending:
            future.result(timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


class PersistenceService:
    """
    Service for persisting full game snapshots to JSON files.
    """

    @staticmethod
    def save_game_to_file(game_state: GameState, file_path: str) -> None:
        """
        Save game state to a JSON file.

        Args:
            game_state: The game state to save
            file_path: Path where to save the file

        Raises:
            IOError: If file cannot be written
            OSError: If path is invalid
        """
        directory = os.path.dirname(file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(game_state.to_json(), f, indent=2)

    @staticmethod
    def load_game_from_file(file_path: str) -> GameState:
        """
        Load game state from a JSON file.

        Args:
            file_path: Path to the JSON file to load

        Returns:
            GameState instance loaded from file

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file contains invalid JSON
            ValueError: If JSON structure is invalid
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Game file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return GameState.from_json(data)
