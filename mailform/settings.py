import secrets
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000
    root_path: str = ""

    debug: bool = False
    reload: bool = False

    jwt_secret: str = secrets.token_urlsafe(64)
    csrf_token_ttl: int = 3600

    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_tls: bool = False
    smtp_starttls: bool = False
    smtp_timeout: float = 30

    # contact form; validated per request by mailform.config
    mailbox_email: str = ""
    from_email: str = ""
    reply_to_email: str = ""
    site_domain: str = ""
    site_name: str = ""

    captcha_secret: str = ""
    captcha_verify_url: str = ""
    captcha_timeout: float = 10
    captcha_token_field: str = "captchaToken"

    check_csrf: bool = False
    csrf_token_field: str = "csrfToken"

    confirmation_required: bool = False


settings = Settings()
