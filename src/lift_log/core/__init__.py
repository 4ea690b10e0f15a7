"""Pure training-data analytics and session-construction engine."""
