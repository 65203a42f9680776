"""Log-only sink: the default for local runs and environments without SMS/email configured."""
import logging

from tablebook.services.notifications.text_sink import TextNotificationSink

logger = logging.getLogger(__name__)


class LogNotificationSink(TextNotificationSink):
    def deliver(self, phone: str, subject: str, message: str) -> bool:
        logger.info("[NOTIFICATION] %s", message)
        return True
