from dataclasses import dataclass
from email.errors import MessageError
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Protocol

import aiosmtplib

from ..logger import get_logger
from ..settings import Settings
from ..utils.email import OutboundMessage


logger = get_logger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    detail: str = ""

    @classmethod
    def ok(cls) -> "DeliveryResult":
        return cls(success=True)

    @classmethod
    def failed(cls, detail: str) -> "DeliveryResult":
        return cls(success=False, detail=detail)


class MessageTransport(Protocol):
    async def send(self, message: OutboundMessage) -> DeliveryResult:
        ...


def build_mime_message(message: OutboundMessage) -> MIMEText:
    mime = MIMEText(message.body, "plain", "utf-8")
    mime["From"] = formataddr((message.sender_name, message.sender))
    mime["To"] = message.recipient
    mime["Subject"] = message.subject
    if message.reply_to:
        mime["Reply-To"] = message.reply_to
    return mime


class SmtpTransport:
    """Delivers messages through an SMTP server, e.g. the local MTA or a relay."""

    def __init__(
        self,
        hostname: str,
        port: int,
        username: str = "",
        password: str = "",
        use_tls: bool = False,
        start_tls: bool = False,
        timeout: float = 30,
    ) -> None:
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.start_tls = start_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpTransport":
        return cls(
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_tls,
            start_tls=settings.smtp_starttls,
            timeout=settings.smtp_timeout,
        )

    async def send(self, message: OutboundMessage) -> DeliveryResult:
        logger.debug(f"Sending email to {message.recipient} ({message.subject})")

        try:
            await aiosmtplib.send(
                build_mime_message(message),
                hostname=self.hostname,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                use_tls=self.use_tls,
                start_tls=self.start_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, MessageError, OSError) as e:
            logger.warning(f"Could not send email to {message.recipient}: {e}")
            return DeliveryResult.failed(str(e) or type(e).__name__)

        return DeliveryResult.ok()
