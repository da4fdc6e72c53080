"""
Administrative mail notifications.

The notifier is built once at startup from MailConfig and injected into the
intake pipeline. When mail is disabled every call is a no-op that reports
itself as skipped; when enabled each call opens a short-lived SMTP session
in a worker thread with bounded connect and transfer timeouts.
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from clyra_api.core.exceptions import NotifyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailConfig:
    enabled: bool = False
    user: Optional[str] = None
    password: Optional[str] = None
    recipient: Optional[str] = None
    from_name: str = "Clyra Overseas Website"
    host: str = "smtp.gmail.com"
    port: int = 587
    connection_timeout: float = 10.0
    socket_timeout: float = 15.0


class NotifyResult(BaseModel):
    """Outcome of a single notify call (also returned by /api/test-mail)."""

    model_config = ConfigDict(populate_by_name=True)

    skipped: bool = False
    message_id: Optional[str] = Field(default=None, serialization_alias="messageId")
    accepted: List[str] = []
    rejected: List[str] = []


class MailNotifier:
    def __init__(self, config: MailConfig):
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def _sender_domain(self) -> str:
        if self.config.user and "@" in self.config.user:
            return self.config.user.rsplit("@", 1)[1]
        return "localhost"

    def build_message(self, reply_to: str, subject: str, html: str, text: Optional[str] = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.config.from_name, self.config.user or ""))
        message["To"] = self.config.recipient or ""
        message["Reply-To"] = reply_to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=self._sender_domain())
        message.set_content(text or "This notification requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def _open(self) -> smtplib.SMTP:
        # the connect timeout also bounds the server greeting read
        server = smtplib.SMTP(timeout=self.config.connection_timeout)
        try:
            server.connect(self.config.host, self.config.port)
            server.sock.settimeout(self.config.socket_timeout)
            server.starttls()
            if self.config.user and self.config.password:
                server.login(self.config.user, self.config.password)
        except BaseException:
            server.close()
            raise
        return server

    def _send_sync(self, message: EmailMessage) -> NotifyResult:
        if not self.config.recipient:
            raise NotifyError("No notification recipient configured (set MAIL_TO or MAIL_USER)")

        try:
            server = self._open()
            try:
                refused = server.send_message(message)
            finally:
                try:
                    server.quit()
                except (smtplib.SMTPException, OSError):
                    server.close()
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise NotifyError(f"Mail delivery failed: {e}") from e

        recipients = [addr.strip() for addr in message["To"].split(",") if addr.strip()]
        return NotifyResult(
            message_id=message["Message-ID"],
            accepted=[addr for addr in recipients if addr not in refused],
            rejected=list(refused),
        )

    async def notify(self, reply_to: str, subject: str, html: str, text: Optional[str] = None) -> NotifyResult:
        """
        Deliver one notification to the administrative recipient.

        Args:
            reply_to: Address replies should go to (the submitter)
            subject: Mail subject line
            html: HTML body
            text: Optional plain-text alternative

        Returns:
            NotifyResult: skipped=True when mail is disabled

        Raises:
            NotifyError: on timeout, authentication or transport failure
        """
        if not self.config.enabled:
            return NotifyResult(skipped=True)

        try:
            message = self.build_message(reply_to, subject, html, text)
        except (ValueError, TypeError) as e:
            raise NotifyError(f"Could not build notification: {e}") from e

        return await asyncio.to_thread(self._send_sync, message)

    def _verify_sync(self) -> None:
        server = self._open()
        try:
            server.noop()
        finally:
            server.quit()

    async def verify(self) -> bool:
        """Check that the SMTP server is reachable and accepts our credentials."""
        if not self.config.enabled:
            logger.info("ℹ️ MAIL_ENABLED is false, emails will be skipped")
            return False

        try:
            await asyncio.to_thread(self._verify_sync)
            logger.info("✅ Mail transport is ready")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Mail transport error: {str(e)}")
            return False
