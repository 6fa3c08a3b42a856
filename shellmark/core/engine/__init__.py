"""Plan engine — planner, renderer, executor."""
