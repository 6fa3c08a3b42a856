"""Click command groups registered by ``shellmark.main``."""
