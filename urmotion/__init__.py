"""Joint-trajectory interpolation, a simulated controller, ghost playback and goal planning."""

__version__ = "0.1.0"

__all__ = ["animator", "controller", "planner", "scene", "trajectory"]