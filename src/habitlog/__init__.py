"""habitlog - local-first habit tracking with streaks and insights."""

__version__ = "0.3.0"
