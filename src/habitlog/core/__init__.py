"""Core engine for habitlog: models, persistence, streaks and statistics."""
