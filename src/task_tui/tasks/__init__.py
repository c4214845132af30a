# src/task_tui/tasks/__init__.py
