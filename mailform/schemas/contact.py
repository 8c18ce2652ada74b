from typing import Literal

from pydantic import BaseModel, Field


class ContactResponse(BaseModel):
    status: Literal["success"] = Field("success", description="The message has been delivered")


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str = Field(description="Human readable error message")
    captchaErrors: list[str] | None = Field(None, description="Error codes reported by the captcha provider")


class CsrfTokenResponse(BaseModel):
    csrf_token: str = Field(description="Token to submit with the contact form")
