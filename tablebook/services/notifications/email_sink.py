"""
Send reservation notifications by email via SMTP (Google Gmail or other) to the operator inbox.
Set NOTIFY_EMAIL, SMTP_USER, SMTP_PASSWORD in .env. Use a Gmail App Password (not your normal password).
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from tablebook.services.notifications.text_sink import TextNotificationSink

logger = logging.getLogger(__name__)


class EmailNotificationSink(TextNotificationSink):
    def __init__(
        self,
        to_email: str,
        *,
        smtp_host: str,
        smtp_port: int,
        smtp_user: str,
        smtp_password: str,
        from_email: str | None = None,
    ) -> None:
        self._to_email = (to_email or "").strip()
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = (smtp_user or "").strip()
        self._smtp_password = (smtp_password or "").strip()
        self._from_email = (from_email or "").strip()

    def _from_address(self) -> str:
        if self._from_email:
            return self._from_email
        if self._smtp_user:
            return f"Reservations <{self._smtp_user}>"
        return "Reservations <noreply@localhost>"

    def deliver(self, phone: str, subject: str, message: str) -> bool:
        """Send one email. Returns True if sent, False if skipped (not configured)."""
        if not self._to_email:
            logger.debug("NOTIFY_EMAIL not set; skipping email notify")
            return False
        if not self._smtp_user or not self._smtp_password:
            logger.debug("SMTP_USER or SMTP_PASSWORD not set; skipping email notify")
            return False
        body = f"{message}\n\nCustomer phone: {phone}"
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._from_address()
        msg["To"] = self._to_email
        msg.attach(MIMEText(body, "plain"))
        msg.attach(MIMEText(f"<pre style='font-family:sans-serif'>{body}</pre>", "html"))
        with smtplib.SMTP(self._smtp_host, self._smtp_port, timeout=10) as server:
            server.starttls()
            server.login(self._smtp_user, self._smtp_password)
            server.sendmail(self._smtp_user, [self._to_email], msg.as_string())
        logger.info("Email sent to %s: %s", self._to_email, subject)
        return True
