"""
Birthday notifiers: log, email.
Each notifier delivers in its own way but exposes the same send(name, email, message) -> bool
so the dispatcher stays channel-agnostic. One notifier is active per process (BIRTHDAY_NOTIFIER).
"""
from app.services.notifiers.base import Notifier
from app.services.notifiers.registry import get_notifier, list_notifiers

__all__ = [
    "Notifier",
    "get_notifier",
    "list_notifiers",
]
