# src/task_tui/cli/__init__.py
