"""Tests for the undo stack, payload parsing and the command dispatcher."""

import pytest

from courtside.models import GameState, PlayerRef, StatType
from courtside.services import (
    GameCommandDispatcher, GameEngine, InvalidModifier, NothingToUndo, UndoStack
)
from courtside.services.game_commands import parse_player_ref, parse_stat_action
from courtside.models.stat_event import StatEvent

HOME = [PlayerRef(f"h{i}") for i in range(1, 7)]
AWAY = [PlayerRef(f"a{i}") for i in range(1, 7)]


def _event(event_id="e1", stat_type=StatType.FIELD_GOAL, modifier="made"):
    return StatEvent(
        id=event_id, game_id="g1", team_id="home", player_ref=HOME[0],
        stat_type=stat_type, modifier=modifier, value=2, quarter=1,
        clock_minutes_snapshot=9, clock_seconds_snapshot=30, created_at=100.0,
    )


@pytest.fixture
def engine():
    engine = GameEngine(GameState(game_id="g1"), debounce_window=0)
    engine.load_team("home", HOME, HOME[:5])
    engine.load_team("away", AWAY, AWAY[:5])
    return engine


def test_undo_stack_holds_only_the_latest_action():
    stack = UndoStack()
    state = GameState()
    stack.push(_event("e1"), state)
    stack.push(_event("e2"), state)

    assert stack.undo().event.id == "e2"
    assert not stack.can_undo()
    with pytest.raises(NothingToUndo):
        stack.undo()


def test_undo_stack_snapshots_prior_state():
    stack = UndoStack()
    state = GameState()
    stack.push(_event(), state)
    state.score_home = 9

    assert stack.peek().prior_state.score_home == 0
    assert stack.peek().description == "field goal made"


def test_parse_player_ref_variants():
    assert parse_player_ref(None) is None
    assert parse_player_ref("") is None
    assert parse_player_ref("h1") == PlayerRef("h1")
    assert parse_player_ref({"player_id": 7, "is_custom": True}) == PlayerRef("7", is_custom=True)


def test_parse_stat_action():
    action = parse_stat_action({
        "team_id": "home",
        "stat_type": "three_pointer",
        "modifier": "made",
        "player": {"player_id": "h2"},
        "shot_location": {"x": 10, "y": 40, "zone": "wing_3_left"},
    })
    assert action.stat_type == StatType.THREE_POINTER
    assert action.player_ref == PlayerRef("h2")
    assert action.shot_location.zone == "wing_3_left"
    assert not action.is_opponent_stat


def test_parse_stat_action_rejects_bad_payloads():
    with pytest.raises(ValueError):
        parse_stat_action({"stat_type": "field_goal"})
    with pytest.raises(InvalidModifier):
        parse_stat_action({"team_id": "home", "stat_type": "dunk"})


def test_dispatcher_drives_engine(engine):
    dispatcher = GameCommandDispatcher(engine)
    dispatcher.dispatch("start_game")
    dispatcher.dispatch("clock_start")
    dispatcher.dispatch("record", {
        "team_id": "home", "stat_type": "field_goal", "modifier": "made", "player": "h1",
    })
    dispatcher.dispatch("substitute", {"team_id": "home", "player_out": "h1", "player_in": "h6"})
    dispatcher.dispatch("set_arrow", {"team_id": "away"})
    dispatcher.dispatch("clock_set", {"minutes": 3, "seconds": 15})

    state = engine.state_snapshot()
    assert state.score_home == 2
    assert PlayerRef("h6") in state.rosters["home"].on_court
    assert state.possession_arrow == "away"
    assert state.clock_seconds_remaining == 195

    dispatcher.dispatch("undo")
    assert PlayerRef("h1") in engine.game_state.rosters["home"].on_court
    assert engine.game_state.score_home == 2
    assert engine.game_state.possession_arrow is None
    assert engine.game_state.clock_seconds_remaining == 600
    assert engine.game_state.clock_running


def test_dispatcher_unknown_command(engine):
    dispatcher = GameCommandDispatcher(engine)
    assert "record" in dispatcher.available_commands()
    with pytest.raises(KeyError):
        dispatcher.dispatch("slam_dunk")


def test_dispatcher_substitute_requires_both_players(engine):
    dispatcher = GameCommandDispatcher(engine)
    dispatcher.dispatch("start_game")
    with pytest.raises(ValueError):
        dispatcher.dispatch("substitute", {"team_id": "home", "player_out": "h1"})


def test_dispatcher_jump_ball(engine):
    dispatcher = GameCommandDispatcher(engine)
    dispatcher.dispatch("start_game")
    dispatcher.dispatch("set_arrow", {"team_id": "home"})

    assert dispatcher.dispatch("jump_ball") == "home"
    assert engine.game_state.possession_team_id == "home"
    assert engine.game_state.possession_arrow == "away"
