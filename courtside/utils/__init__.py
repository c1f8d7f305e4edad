"""
Utilities package for the Courtside live tracker.

This package contains utility functions and constants used throughout the application.
"""
from .constants import (
    APP_TITLE, DEFAULT_QUARTER_LENGTH_MIN, DEFAULT_OVERTIME_LENGTH_MIN,
    MIN_QUARTER_LENGTH_MIN, MAX_QUARTER_LENGTH_MIN, REGULATION_QUARTERS,
    SHOT_CLOCK_FULL, SHOT_CLOCK_SHORT, SHOT_CLOCK_MAX,
    PLAYERS_ON_COURT, BONUS_FOUL_THRESHOLD, DEFAULT_TIMEOUTS_PER_TEAM,
    DEBOUNCE_WINDOW_SECONDS, PERSPECTIVE_TEAM_A_UP, PERSPECTIVE_TEAM_B_UP
)
from .time_utils import fmt_mmss, split_mmss, shot_clock_level, now_ts

__all__ = [
    "fmt_mmss", "split_mmss", "shot_clock_level", "now_ts", "APP_TITLE",
    "DEFAULT_QUARTER_LENGTH_MIN", "DEFAULT_OVERTIME_LENGTH_MIN", "MIN_QUARTER_LENGTH_MIN",
    "MAX_QUARTER_LENGTH_MIN", "REGULATION_QUARTERS",
    "SHOT_CLOCK_FULL", "SHOT_CLOCK_SHORT", "SHOT_CLOCK_MAX", "PLAYERS_ON_COURT",
    "BONUS_FOUL_THRESHOLD", "DEFAULT_TIMEOUTS_PER_TEAM", "DEBOUNCE_WINDOW_SECONDS",
    "PERSPECTIVE_TEAM_A_UP", "PERSPECTIVE_TEAM_B_UP"
]
