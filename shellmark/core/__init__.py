"""Core domain — models, persistence, engine, services."""
