import html
from collections.abc import Mapping
from dataclasses import dataclass

from ..exceptions.contact import INVALID_EMAIL, MISSING_FIELDS, ClientInputError
from .validators import is_valid_email, sanitize_email


DEFAULT_NAME = "somebody"


@dataclass(frozen=True)
class Submission:
    email: str
    message: str
    name: str = DEFAULT_NAME


def sanitize_submission(form: Mapping[str, str]) -> Submission | ClientInputError:
    """
    Extract the user supplied fields from a submitted form.

    A missing email or message is reported before a malformed email address.
    """

    email = sanitize_email(form.get("email") or "")
    message = html.escape(form.get("message") or "")
    name = html.escape(form.get("name") or DEFAULT_NAME)

    if not email or not message:
        return ClientInputError(MISSING_FIELDS)
    if not is_valid_email(email):
        return ClientInputError(INVALID_EMAIL)

    return Submission(email=email, message=message, name=name)
