"""Local file persistence for the training log."""
