# src/task_tui/core/__init__.py
