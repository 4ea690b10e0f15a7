"""Command-line interface for lift-log."""
