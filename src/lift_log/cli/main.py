"""
CLI entry point using Typer.

Importing the command modules registers their commands on the shared app:
- sessions: init, log, history, delete
- planning: draft-*, suggest, pyramid, programs, catalog
- analysis: volume, deload, streak, calendar, compare, records, 1rm, strength, summary
- goals: goal-add, goals, goal-delete, weight-add, weight
"""

from .app import app
from .commands import analysis, goals, planning, sessions  # noqa: F401

if __name__ == "__main__":
    app()
