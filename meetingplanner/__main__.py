"""
Convenience entry point for running meetingplanner directly.

Usage: python -m meetingplanner [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
