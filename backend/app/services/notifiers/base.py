"""Protocol for birthday notifiers. The dispatcher only needs send(); how it is delivered is up to the notifier."""
from typing import Protocol


class Notifier(Protocol):
    """Interface for log, email, etc. Same contract; only delivery differs."""

    @property
    def notifier_id(self) -> str:
        """Unique id (e.g. 'log', 'email') used by the registry and BIRTHDAY_NOTIFIER."""
        ...

    def send(self, name: str, email: str, message: str) -> bool:
        """
        Deliver one birthday message. True means delivered (terminal);
        False or an exception means failed and the dispatcher retries.
        """
        ...
