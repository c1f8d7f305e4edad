"""
Web application module for the Courtside live tracker.

This module contains the Flask web server that serves the operator
interface's static assets and exposes the live game engine as JSON API endpoints.
"""
import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..models import GameState, StatType
from ..services import AutomationFlags, GameNotActive, ServiceFactory, TrackerError
from ..services.game_commands import parse_player_ref, parse_stat_action
from ..services.shot_location import map_tap, zone_label, points_for_zone
from ..utils import APP_TITLE, PERSPECTIVE_TEAM_A_UP

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    One operator device drives one game, so the app keeps a single engine,
    session and dispatcher built by the service factory.
    """

    def __init__(self, service_factory: Optional[ServiceFactory] = None):
        self.service_factory = service_factory or ServiceFactory()
        self.persistence_errors = []
        self.service_factory.configure_failure_handler(self._on_persistence_failure)
        self.new_game(GameState())

    def new_game(
        self,
        game_state: GameState,
        opponent_team_id: Optional[str] = None,
        automation: Optional[AutomationFlags] = None,
    ) -> None:
        """Replace the current game with a fresh engine for ``game_state``."""
        services = self.service_factory.create_complete_service_suite(
            game_state, opponent_team_id=opponent_team_id, automation=automation
        )
        self.engine = services['engine']
        self.session = services['session']
        self.dispatcher = services['dispatcher']
        self.event_sink = services['event_sink']

    def _on_persistence_failure(self, failure) -> None:
        self.persistence_errors.append({"event_id": failure.event_id, "error": str(failure)})


def _error_response(error: Exception):
    if isinstance(error, TrackerError):
        status = 409 if isinstance(error, GameNotActive) else 400
        return jsonify({"success": False, "error": str(error), "error_code": error.code}), status
    if isinstance(error, (ValueError, KeyError, TypeError)):
        return jsonify({"success": False, "error": str(error), "error_code": "bad_request"}), 400
    logger.exception("Unexpected error handling %s", request.path)
    return jsonify({"success": False, "error": str(error), "error_code": "internal_error"}), 500


def _payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def create_app(static_folder: str = ".", app_state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        static_folder: Directory to serve static files from
        app_state: State holder to use; a fresh one is created when omitted

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__, static_folder=static_folder, static_url_path="")
    state = app_state or WebAppState()
    app.config["APP_STATE"] = state

    # ==================== API Endpoints ==================== #

    def _build_state_data() -> dict:
        engine = state.engine
        snapshot = engine.state_snapshot()
        return {
            "game": snapshot.to_json(),
            "display": engine.display(),
            "can_undo": engine.can_undo(),
            "selection": {
                "team_id": state.session.selected_team_id,
                "player": state.session.selected_player.to_dict() if state.session.selected_player else None,
                "opponent": state.session.opponent_selected,
            },
            "persistence_errors": list(state.persistence_errors),
        }

    def _ok(**extra):
        body = {"success": True, "state": _build_state_data()}
        body.update(extra)
        return jsonify(body)

    def _run(operation, **extra):
        try:
            result = operation()
        except Exception as e:
            return _error_response(e)
        if callable(extra.get("render")):
            render = extra.pop("render")
            extra.update(render(result))
        return _ok(**extra)

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Get the current game state and display values."""
        try:
            return jsonify({"success": True, "state": _build_state_data()})
        except Exception as e:
            return _error_response(e)

    # -------------------- Lifecycle -------------------- #

    @app.route("/api/game/setup", methods=["POST"])
    def setup_game():
        """Create a new scheduled game and load both rosters."""
        data = _payload()

        def operation():
            home = data.get("home_team_id")
            away = data.get("away_team_id")
            if not home or not away or home == away:
                raise ValueError("Two distinct team ids are required")
            game_state = GameState(
                game_id=str(data.get("game_id", "")),
                home_team_id=str(home),
                away_team_id=str(away),
            )
            state.new_game(
                game_state,
                opponent_team_id=data.get("opponent_team_id"),
                automation=AutomationFlags.from_dict(data.get("automation")),
            )
            config = data.get("config") or {}
            if config:
                state.engine.configure_game(
                    quarter_length_minutes=config.get("quarter_length_minutes"),
                    overtime_length_minutes=config.get("overtime_length_minutes"),
                    timeouts_per_team=config.get("timeouts_per_team"),
                )
            for team_id, roster in (data.get("rosters") or {}).items():
                eligible = [parse_player_ref(p) for p in roster.get("eligible", [])]
                starters = [parse_player_ref(p) for p in roster.get("starters", [])]
                state.engine.load_team(team_id, eligible, starters)

        return _run(operation, message="Game set up")

    @app.route("/api/game/configure", methods=["POST"])
    def configure_game():
        data = _payload()
        return _run(lambda: state.engine.configure_game(
            quarter_length_minutes=data.get("quarter_length_minutes"),
            overtime_length_minutes=data.get("overtime_length_minutes"),
            timeouts_per_team=data.get("timeouts_per_team"),
        ))

    @app.route("/api/game/start", methods=["POST"])
    def start_game():
        return _run(state.engine.start_game, message="Game started")

    @app.route("/api/game/end", methods=["POST"])
    def end_game():
        return _run(state.engine.end_game, message="Game ended")

    @app.route("/api/game/cancel", methods=["POST"])
    def cancel_game():
        return _run(state.engine.cancel_game, message="Game cancelled")

    # -------------------- Clocks -------------------- #

    @app.route("/api/clock/<action>", methods=["POST"])
    def clock_action(action: str):
        data = _payload()
        actions = {
            "start": state.engine.start_clock,
            "stop": state.engine.stop_clock,
            "reset": lambda: state.engine.reset_clock(data.get("seconds")),
            "set": lambda: state.engine.set_clock(int(data.get("minutes", 0)), int(data.get("seconds", 0))),
            "tick": state.engine.tick,
        }
        if action not in actions:
            return jsonify({"success": False, "error": f"Unknown clock action: {action}"}), 404
        return _run(actions[action])

    @app.route("/api/shot-clock/<action>", methods=["POST"])
    def shot_clock_action(action: str):
        data = _payload()
        actions = {
            "start": state.engine.start_shot_clock,
            "stop": state.engine.stop_shot_clock,
            "reset": lambda: state.engine.reset_shot_clock(int(data.get("seconds", 24))),
            "set": lambda: state.engine.set_shot_clock(int(data["seconds"])),
            "tick": state.engine.tick_shot_clock,
            "visibility": lambda: state.engine.set_shot_clock_visible(bool(data.get("visible", True))),
        }
        if action not in actions:
            return jsonify({"success": False, "error": f"Unknown shot clock action: {action}"}), 404
        return _run(actions[action])

    @app.route("/api/quarter/advance", methods=["POST"])
    def advance_quarter():
        return _run(state.engine.advance_quarter)

    # -------------------- Possession -------------------- #

    @app.route("/api/possession", methods=["POST"])
    def set_possession():
        data = _payload()
        return _run(lambda: state.engine.set_possession(data["team_id"]))

    @app.route("/api/possession/arrow", methods=["POST"])
    def set_arrow():
        data = _payload()
        if data.get("flip"):
            return _run(state.engine.flip_arrow)
        return _run(lambda: state.engine.set_arrow(data["team_id"]))

    @app.route("/api/possession/jump-ball", methods=["POST"])
    def jump_ball():
        return _run(state.engine.jump_ball, render=lambda team_id: {"awarded": team_id})

    # -------------------- Stats -------------------- #

    @app.route("/api/select-player", methods=["POST"])
    def select_player():
        data = _payload()

        def operation():
            if data.get("clear"):
                state.session.clear_selection()
            elif data.get("opponent"):
                state.session.select_opponent(data["team_id"])
            else:
                player = parse_player_ref(data.get("player"))
                if player is None:
                    raise ValueError("player is required")
                state.session.select_player(data["team_id"], player)

        return _run(operation)

    def _render_record(result) -> dict:
        return {"event": result.event.to_dict(), "duplicate": result.duplicate}

    @app.route("/api/stats", methods=["POST"])
    def record_stat():
        """Record a stat from an explicit payload or for the selected player."""
        data = _payload()

        def operation():
            if "team_id" in data:
                return state.engine.record(parse_stat_action(data))
            return state.session.record(StatType(data.get("stat_type")), data.get("modifier") or None)

        return _run(operation, render=_render_record)

    @app.route("/api/shot-location", methods=["POST"])
    def shot_location():
        """Map a court tap; with ``made`` set, record the shot for the selection."""
        data = _payload()

        def operation():
            args = (
                float(data["pixel_x"]), float(data["pixel_y"]),
                float(data["container_width"]), float(data["container_height"]),
            )
            if "made" in data:
                if data.get("perspective"):
                    state.session.set_perspective(data["perspective"])
                return state.session.tap_court(*args, made=bool(data["made"]))
            return map_tap(*args, data.get("perspective") or PERSPECTIVE_TEAM_A_UP)

        def render(result) -> dict:
            if hasattr(result, "event"):
                return _render_record(result)
            return {
                "location": result.to_dict(),
                "label": zone_label(result.zone),
                "points": points_for_zone(result.zone),
            }

        return _run(operation, render=render)

    @app.route("/api/substitution", methods=["POST"])
    def make_substitution():
        """Make a player substitution."""
        data = _payload()

        def operation():
            player_out = parse_player_ref(data.get("player_out"))
            player_in = parse_player_ref(data.get("player_in"))
            if player_out is None or player_in is None:
                raise ValueError("Both player_out and player_in are required")
            return state.engine.substitute(data.get("team_id"), player_out, player_in)

        return _run(operation, render=_render_record)

    @app.route("/api/timeout", methods=["POST"])
    def call_timeout():
        data = _payload()
        return _run(
            lambda: state.engine.call_timeout(data.get("team_id"), data.get("timeout_type") or None),
            render=_render_record,
        )

    @app.route("/api/undo", methods=["POST"])
    def undo_action():
        """Undo the most recent recorded action."""
        return _run(state.engine.undo, render=lambda entry: {
            "message": f"Undid {entry.description}",
            "event_id": entry.event.id,
        })

    @app.route("/api/events", methods=["GET"])
    def get_events():
        try:
            return jsonify({"success": True, "events": [e.to_dict() for e in state.engine.events]})
        except Exception as e:
            return _error_response(e)

    # -------------------- Collaborators -------------------- #

    @app.route("/api/snapshot", methods=["POST"])
    def apply_snapshot():
        """Accept an authoritative snapshot from the correction tool."""
        data = _payload()

        def operation():
            game_data = data.get("game")
            if not game_data:
                raise ValueError("No game data provided")
            return state.engine.apply_authoritative_snapshot(GameState.from_json(game_data))

        return _run(operation, message="Snapshot applied")

    @app.route("/api/command", methods=["POST"])
    def dispatch_command():
        """Generic command endpoint: {"command": name, "payload": {...}}."""
        data = _payload()
        return _run(lambda: state.dispatcher.dispatch(data.get("command", ""), data.get("payload") or {}))

    return app


def run_web_app(host: str = "127.0.0.1", port: int = 7122, static_folder: str = ".") -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        static_folder: Directory containing static files (HTML, CSS, JS)
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(static_folder)
    logger.info("Starting %s on http://%s:%s", APP_TITLE, host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    run_web_app(static_folder=project_root)
