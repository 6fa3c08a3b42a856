"""Store file persistence."""
