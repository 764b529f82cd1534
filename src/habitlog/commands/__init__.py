"""Click command groups for habitlog."""
