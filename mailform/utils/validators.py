import re

import email_validator
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError


_ILLEGAL_EMAIL_CHARS = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")

_url_adapter = TypeAdapter(AnyHttpUrl)


def is_valid_email(email: str) -> bool:
    try:
        email_validator.validate_email(email, check_deliverability=False)
    except email_validator.EmailNotValidError:
        return False
    return True


def sanitize_email(email: str) -> str:
    """Remove all characters that are not allowed in an email address."""

    return _ILLEGAL_EMAIL_CHARS.sub("", email)


def is_valid_url(url: str) -> bool:
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        return False
    return True
