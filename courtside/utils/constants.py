"""
Constants for the Courtside live tracker.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Courtside Live Tracker"

# Game timing defaults
DEFAULT_QUARTER_LENGTH_MIN = 10
DEFAULT_OVERTIME_LENGTH_MIN = 5
MIN_QUARTER_LENGTH_MIN = 1
MAX_QUARTER_LENGTH_MIN = 20
REGULATION_QUARTERS = 4

# Shot clock presets
SHOT_CLOCK_FULL = 24
SHOT_CLOCK_SHORT = 14
SHOT_CLOCK_MAX = 35

# Display thresholds (downstream color-coding depends on these)
SHOT_CLOCK_CRITICAL_BELOW = 6
SHOT_CLOCK_WARNING_BELOW = 11

# Team rules
PLAYERS_ON_COURT = 5
BONUS_FOUL_THRESHOLD = 5
DEFAULT_TIMEOUTS_PER_TEAM = 7

# Duplicate-tap guard window
DEBOUNCE_WINDOW_SECONDS = 0.5

# Court perspectives
PERSPECTIVE_TEAM_A_UP = "teamA_attacks_up"
PERSPECTIVE_TEAM_B_UP = "teamB_attacks_up"
