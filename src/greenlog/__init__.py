"""greenlog - garden activity feed and recurring tasks."""

__version__ = "0.1.0"
