"""Service layer for users, lists and tasks of a to-do application."""

__version__ = "0.1.0"
__all__ = ["common", "list_service", "task_service", "user_service"]