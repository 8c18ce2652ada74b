from dataclasses import dataclass

from .exceptions.contact import ConfigurationError
from .logger import get_logger
from .settings import Settings
from .utils.validators import is_valid_email, is_valid_url


logger = get_logger(__name__)


@dataclass(frozen=True)
class Configuration:
    mailbox_email: str
    from_email: str
    reply_to_email: str
    site_domain: str
    site_name: str
    captcha_secret: str = ""
    captcha_verify_url: str = ""
    captcha_timeout: float = 10
    check_csrf: bool = False
    confirmation_required: bool = False

    @property
    def captcha_enabled(self) -> bool:
        return bool(self.captcha_secret and self.captcha_verify_url)


def default_site_name(site_domain: str) -> str:
    return site_domain.split(".")[0].capitalize()


def validate_configuration(settings: Settings, host: str) -> Configuration | ConfigurationError:
    """
    Validate and normalize the contact form settings.

    `host` is the host header of the current request and serves as the site domain if none is configured.
    Sender and reply-to addresses fall back to the mailbox address.
    """

    mailbox_email = settings.mailbox_email.strip()
    emails = {
        "mailbox_email": mailbox_email,
        "from_email": settings.from_email.strip() or mailbox_email,
        "reply_to_email": settings.reply_to_email.strip() or mailbox_email,
    }
    for field, email in emails.items():
        if not email or not is_valid_email(email):
            logger.error(f"Invalid contact form configuration: {field} is not a valid email address")
            return ConfigurationError(f"Error: Server configuration error ({field}).")

    site_domain = settings.site_domain or host
    site_name = settings.site_name or default_site_name(site_domain)

    captcha_verify_url = settings.captcha_verify_url
    if captcha_verify_url and not is_valid_url(captcha_verify_url):
        logger.warning(f"Invalid captcha verify url {captcha_verify_url!r}, captcha verification is disabled")
        captcha_verify_url = ""

    return Configuration(
        mailbox_email=emails["mailbox_email"],
        from_email=emails["from_email"],
        reply_to_email=emails["reply_to_email"],
        site_domain=site_domain,
        site_name=site_name,
        captcha_secret=settings.captcha_secret,
        captcha_verify_url=captcha_verify_url,
        captcha_timeout=settings.captcha_timeout,
        check_csrf=settings.check_csrf,
        confirmation_required=settings.confirmation_required,
    )
