"""
Utility functions for the Courtside live tracker.

This module contains time helpers shared by the clocks, the stat recorder
and the web layer.
"""
import time

from .constants import SHOT_CLOCK_CRITICAL_BELOW, SHOT_CLOCK_WARNING_BELOW


def fmt_mmss(seconds: int) -> str:
    """
    Format seconds as MM:SS string.
    
    Args:
        seconds: Number of seconds to format
        
    Returns:
        Formatted time string in MM:SS format
        
    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(0)
        '00:00'
    """
    seconds = max(0, int(seconds))
    m = seconds // 60
    s = seconds % 60
    return f"{m:02d}:{s:02d}"


def split_mmss(seconds: int) -> tuple:
    """Split a seconds count into a (minutes, seconds) pair."""
    seconds = max(0, int(seconds))
    return seconds // 60, seconds % 60


def shot_clock_level(seconds: int) -> str:
    """
    Classify a shot clock reading for color-coding and audible cues.
    
    Returns:
        "critical" below 6 seconds, "warning" below 11, otherwise "normal"
    """
    if seconds < SHOT_CLOCK_CRITICAL_BELOW:
        return "critical"
    if seconds < SHOT_CLOCK_WARNING_BELOW:
        return "warning"
    return "normal"


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.
    
    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()
