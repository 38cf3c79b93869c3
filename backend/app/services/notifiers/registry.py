"""Registry of birthday notifiers. Add new channels here."""
import logging

from app.services.notifiers.base import Notifier

logger = logging.getLogger(__name__)

_notifiers: dict[str, Notifier] = {}


def register(name: str, notifier: Notifier) -> None:
    """Register a notifier (e.g. 'log', 'email')."""
    _notifiers[name] = notifier
    logger.debug("Registered birthday notifier: %s", name)


def get_notifier(name: str) -> Notifier:
    """Get notifier by name. Raises KeyError if unknown."""
    if name not in _notifiers:
        raise KeyError(f"Unknown notifier: {name}. Available: {list(_notifiers.keys())}")
    return _notifiers[name]


def list_notifiers() -> list[str]:
    """List registered notifier ids."""
    return list(_notifiers.keys())


def _init_registry() -> None:
    from app.services.notifiers.email_notifier import EmailNotifier
    from app.services.notifiers.log_notifier import LogNotifier

    register("log", LogNotifier())
    register("email", EmailNotifier())


# Register built-in notifiers on first import
_init_registry()
