"""
Courtside Live Tracker

The live statistics engine of a coaching dashboard for amateur basketball
teams: game clock, shot clock, score, fouls, possession, on-court rosters
and the stream of recorded stat events, with the rules that govern them.

This package provides the engine itself and a Flask web interface for the
operator device courtside.
"""
from .models import GameState, GameStatus, PlayerRef, StatAction, StatEvent, StatType
from .services import GameEngine, TrackerSession, ServiceFactory, map_tap
from .ui import create_app, run_web_app
from .utils import fmt_mmss, now_ts, APP_TITLE

__version__ = "1.0.0"
__author__ = "Courtside Development Team"

__all__ = [
    "GameState", "GameStatus", "PlayerRef", "StatAction", "StatEvent", "StatType",
    "GameEngine", "TrackerSession", "ServiceFactory", "map_tap",
    "create_app", "run_web_app", "fmt_mmss", "now_ts", "APP_TITLE"
]
