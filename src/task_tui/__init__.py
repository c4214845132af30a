# src/task_tui/__init__.py

"""Interactive terminal task manager."""

__version__ = "0.1.0"
