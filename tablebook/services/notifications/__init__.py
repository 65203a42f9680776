"""
Notification sinks: log, email (SMTP) or SMS webhook. Selected by NOTIFY_CHANNEL.
All sinks share the NotificationSink contract; the dispatcher makes delivery fire-and-forget.
"""
import logging

from tablebook.services.notifications.base import NotificationSink
from tablebook.services.notifications.dispatcher import NotificationDispatcher
from tablebook.services.notifications.email_sink import EmailNotificationSink
from tablebook.services.notifications.log_sink import LogNotificationSink
from tablebook.services.notifications.webhook_sink import WebhookNotificationSink

logger = logging.getLogger(__name__)


def build_notification_sink(settings) -> NotificationSink:
    channel = (settings.notify_channel or "log").lower()
    if channel == "email":
        return EmailNotificationSink(
            settings.notify_email,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            from_email=settings.notify_from,
        )
    if channel == "webhook":
        if settings.notify_webhook_url:
            return WebhookNotificationSink(settings.notify_webhook_url)
        logger.warning("NOTIFY_CHANNEL=webhook but NOTIFY_WEBHOOK_URL not set; logging notifications instead")
    elif channel != "log":
        logger.warning("Unknown NOTIFY_CHANNEL %r; logging notifications instead", channel)
    return LogNotificationSink()


__all__ = [
    "EmailNotificationSink",
    "LogNotificationSink",
    "NotificationDispatcher",
    "NotificationSink",
    "WebhookNotificationSink",
    "build_notification_sink",
]
