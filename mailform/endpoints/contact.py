"""Endpoints for the contact form"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import validate_configuration
from ..exceptions.contact import (
    ClientInputError,
    ConfigurationError,
    ContactError,
    DeliveryError,
    MethodError,
    NetworkError,
    VerificationError,
)
from ..pipeline import ContactPipeline, ContactRequest
from ..schemas.contact import ContactResponse, CsrfTokenResponse
from ..services.mailer import MessageTransport, SmtpTransport
from ..settings import settings
from ..utils.csrf import CsrfTokenValidator, JwtCsrfTokenValidator, issue_csrf_token
from ..utils.docs import responses


router = APIRouter(tags=["contact"])

CSRF_HEADER = "X-CSRF-Token"


def get_transport() -> MessageTransport:
    return SmtpTransport.from_settings(settings)


def get_csrf_validator() -> CsrfTokenValidator:
    return JwtCsrfTokenValidator(settings.jwt_secret)


async def build_contact_request(request: Request) -> ContactRequest:
    form: dict[str, str] = {}
    if request.method == "POST":
        form = {key: value for key, value in (await request.form()).items() if isinstance(value, str)}

    return ContactRequest(
        method=request.method,
        host=request.url.hostname or "",
        client_ip=request.client.host if request.client else "",
        form=form,
        captcha_token=form.get(settings.captcha_token_field, ""),
        csrf_token=form.get(settings.csrf_token_field) or request.headers.get(CSRF_HEADER),
    )


@router.post(
    "/contact",
    responses=responses(
        ContactResponse,
        MethodError,
        ClientInputError,
        VerificationError,
        NetworkError,
        ConfigurationError,
        DeliveryError,
    ),
)
@router.api_route(
    "/contact", methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"], include_in_schema=False
)
async def send_message(
    request: Request,
    transport: MessageTransport = Depends(get_transport),
    csrf_validator: CsrfTokenValidator = Depends(get_csrf_validator),
) -> Any:
    """
    Submit the contact form.

    The form fields `email` and `message` are required, `name` is optional.
    A captcha response token is required if captcha verification is configured,
    and a token from `GET /csrf` (form field or `X-CSRF-Token` header) if csrf checking is enabled.

    The message is sent to the site owner and a confirmation is sent to the given email address.
    """

    contact_request = await build_contact_request(request)

    result: Any
    config = validate_configuration(settings, contact_request.host)
    if isinstance(config, ContactError):
        result = config
    else:
        result = await ContactPipeline(config, transport, csrf_validator).handle(contact_request)

    return JSONResponse(result.body(), status_code=result.status_code)


@router.get("/csrf", responses=responses(CsrfTokenResponse))
async def get_csrf_token() -> Any:
    """Return a new token for the contact form. Tokens expire after `CSRF_TOKEN_TTL` seconds."""

    return {"csrf_token": issue_csrf_token()}
