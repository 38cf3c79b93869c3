"""Default notifier: write the greeting to the application log."""
import logging

logger = logging.getLogger(__name__)


class LogNotifier:
    notifier_id = "log"

    def send(self, name: str, email: str, message: str) -> bool:
        logger.info("%s", message)
        return True
