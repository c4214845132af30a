# src/task_tui/ui/__init__.py
