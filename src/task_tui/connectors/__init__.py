# src/task_tui/connectors/__init__.py
