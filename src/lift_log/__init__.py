"""lift-log: strength-training log and training-load analytics."""

__version__ = "0.1.0"
