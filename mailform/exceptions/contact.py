from typing import Any

from fastapi import status


class ContactError:
    """
    Terminal error state of the contact pipeline.

    Instances are returned (not raised) by the pipeline stages and turned into a response once, at the HTTP boundary.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An error occurred. Please try again later."
    description: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, **extra: Any) -> None:
        self.message: str = message or self.detail
        self.extra: dict[str, Any] = extra

    def body(self) -> dict[str, Any]:
        return {"status": "error", "message": self.message, **self.extra}

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.body() == other.body()  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ConfigurationError(ContactError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Error: Server configuration error."
    description = "The server is misconfigured."


class ClientInputError(ContactError):
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    detail = "Error: Missing required fields."
    description = "A required field is missing or malformed."


class VerificationError(ContactError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "CAPTCHA verification failed."
    description = "The CAPTCHA or CSRF verification failed."


class NetworkError(VerificationError):
    detail = "CAPTCHA verification failed due to a network error."
    description = "The CAPTCHA provider could not be reached."


class MethodError(ContactError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    detail = "Error: Method not allowed"
    description = "Only POST requests are accepted."


class DeliveryError(ContactError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Error: Could not send message"
    description = "The message could not be sent."


MISSING_FIELDS = "Error: Missing required fields."
INVALID_EMAIL = "Error: Invalid email address."
SESSION_ISSUE = "There was an issue with your session. Please refresh the page and try again."
