#!/usr/bin/env python3
"""
Main entry point for the Courtside live tracker web application.

This script launches the Flask-based web server for the courtside operator device.
"""
import argparse
import os

from courtside.ui.web_app import run_web_app

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the Courtside live tracker server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: localhost only)")
    parser.add_argument("--port", type=int, default=7122, help="Port to listen on")
    args = parser.parse_args()

    # Serve static files from the project root
    project_root = os.path.dirname(os.path.abspath(__file__))
    run_web_app(host=args.host, port=args.port, static_folder=project_root)
