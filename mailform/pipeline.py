from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import Configuration
from .exceptions.contact import ContactError, DeliveryError, MethodError
from .logger import get_logger
from .services.mailer import MessageTransport
from .utils.captcha import CaptchaVerifier, verifier_for
from .utils.csrf import CsrfCheck, CsrfTokenValidator, csrf_check_for
from .utils.email import compose_messages
from .utils.submission import Submission, sanitize_submission


logger = get_logger(__name__)


@dataclass(frozen=True)
class ContactRequest:
    method: str
    host: str
    client_ip: str
    form: Mapping[str, str] = field(default_factory=dict)
    captcha_token: str = ""
    csrf_token: str | None = None


@dataclass(frozen=True)
class Success:
    status_code: int = 200

    def body(self) -> dict[str, Any]:
        return {"status": "success"}


class ContactPipeline:
    """
    Handle a single contact form submission.

    The stages run strictly in order and the first failing stage ends the request:
    method check, captcha, csrf, sanitizing, composing, sending the owner notification, sending the confirmation.
    """

    def __init__(
        self,
        config: Configuration,
        transport: MessageTransport,
        csrf_validator: CsrfTokenValidator,
        *,
        captcha: CaptchaVerifier | None = None,
        csrf: CsrfCheck | None = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.captcha = captcha or verifier_for(config)
        self.csrf = csrf or csrf_check_for(config, csrf_validator)

    async def handle(self, request: ContactRequest) -> Success | ContactError:
        if request.method.upper() != "POST":
            return MethodError()

        captcha_result = await self.captcha.verify(request.captcha_token, request.client_ip)
        if not captcha_result.success:
            return captcha_result.error or ContactError()

        csrf_result = self.csrf.verify(request.csrf_token)
        if not csrf_result.success:
            return csrf_result.error or ContactError()

        submission = sanitize_submission(request.form)
        if isinstance(submission, ContactError):
            return submission

        return await self.dispatch(submission)

    async def dispatch(self, submission: Submission) -> Success | ContactError:
        notification, confirmation = compose_messages(self.config, submission)

        result = await self.transport.send(notification)
        if not result.success:
            logger.error(f"Could not deliver contact form message to {notification.recipient}: {result.detail}")
            return DeliveryError(f"Error: {result.detail}")

        result = await self.transport.send(confirmation)
        if not result.success:
            if self.config.confirmation_required:
                logger.error(f"Could not deliver confirmation to {confirmation.recipient}: {result.detail}")
                return DeliveryError(f"Error: {result.detail}")
            # the owner has been notified, so the submission itself went through
            logger.warning(f"Could not deliver confirmation to {confirmation.recipient}: {result.detail}")

        logger.info(f"Contact form message from {submission.email} delivered to {notification.recipient}")
        return Success()
