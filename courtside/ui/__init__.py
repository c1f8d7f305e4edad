"""
UI package for the Courtside live tracker.

This package contains the Flask web server the courtside operator device talks to.
"""
from .web_app import create_app, run_web_app, WebAppState

__all__ = ["create_app", "run_web_app", "WebAppState"]
