"""tasktray: a personal task manager with Todos, Completed and Trash lists."""

__version__ = "0.1.0"
