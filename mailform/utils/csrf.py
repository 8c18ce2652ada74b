from datetime import datetime, timedelta, timezone
from typing import Protocol

import jwt

from ..config import Configuration
from ..exceptions.contact import SESSION_ISSUE, ConfigurationError, VerificationError
from ..logger import get_logger
from ..settings import settings
from .verification import VerificationResult


logger = get_logger(__name__)

CSRF_AUDIENCE = "mailform:csrf"


class CsrfTokenValidator(Protocol):
    def token_is_valid(self, token: str) -> bool:
        ...


class JwtCsrfTokenValidator:
    """Accepts the signed, short lived tokens created by `issue_csrf_token`."""

    def __init__(self, secret: str) -> None:
        self.secret = secret

    def token_is_valid(self, token: str) -> bool:
        try:
            jwt.decode(token, self.secret, ["HS256"], audience=CSRF_AUDIENCE, options={"require": ["exp", "aud"]})
        except jwt.InvalidTokenError:
            return False
        return True


def issue_csrf_token(secret: str | None = None, ttl: timedelta | None = None) -> str:
    ttl = ttl if ttl is not None else timedelta(seconds=settings.csrf_token_ttl)
    now = datetime.now(timezone.utc)
    return jwt.encode({"aud": CSRF_AUDIENCE, "iat": now, "exp": now + ttl}, secret or settings.jwt_secret, "HS256")


class CsrfCheck(Protocol):
    def verify(self, token: str | None) -> VerificationResult:
        ...


class SkipCsrfCheck:
    def verify(self, token: str | None) -> VerificationResult:
        return VerificationResult.passed()


class TokenCsrfCheck:
    def __init__(self, validator: CsrfTokenValidator) -> None:
        self.validator = validator

    def verify(self, token: str | None) -> VerificationResult:
        if not token:
            # csrf checking is enabled but the integration never handed us a token
            logger.error("CSRF check enabled but no token was supplied")
            return VerificationResult.failed(ConfigurationError(), "missing-token")

        if not self.validator.token_is_valid(token):
            logger.info("CSRF token rejected")
            return VerificationResult.failed(VerificationError(SESSION_ISSUE), "invalid-token")

        return VerificationResult.passed()


def csrf_check_for(config: Configuration, validator: CsrfTokenValidator) -> CsrfCheck:
    if not config.check_csrf:
        return SkipCsrfCheck()
    return TokenCsrfCheck(validator)
