"""TASK CENTRAL: task list state, validation and persistence engine."""

__version__ = "0.1.0"
