from dataclasses import replace

import pytest
from pytest_mock import MockerFixture

from conftest import FakeCaptchaProvider, RecordingTransport, StaticCsrfValidator
from mailform.config import Configuration
from mailform.exceptions.contact import (
    INVALID_EMAIL,
    MISSING_FIELDS,
    ClientInputError,
    ConfigurationError,
    DeliveryError,
    MethodError,
    VerificationError,
)
from mailform.pipeline import ContactPipeline, ContactRequest, Success
from mailform.services.mailer import DeliveryResult


FORM = {"email": "test@example.com", "message": "Hello there", "name": "Jane"}


def make_request(**kwargs: object) -> ContactRequest:
    defaults: dict[str, object] = {"method": "POST", "host": "example.com", "client_ip": "10.0.0.1", "form": FORM}
    return ContactRequest(**(defaults | kwargs))  # type: ignore[arg-type]


async def test__success(config: Configuration, transport: RecordingTransport) -> None:
    result = await ContactPipeline(config, transport, StaticCsrfValidator(False)).handle(make_request())

    assert result == Success()
    assert result.body() == {"status": "success"}
    assert [message.recipient for message in transport.sent] == ["owner@example.com", "test@example.com"]
    assert transport.sent[0].reply_to == "test@example.com"
    assert transport.sent[1].reply_to == "support@example.com"


@pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS", "PUT", "DELETE", "PATCH"])
async def test__method_not_allowed(
    config: Configuration, transport: RecordingTransport, mocker: MockerFixture, method: str
) -> None:
    captcha = mocker.AsyncMock()

    result = await ContactPipeline(config, transport, StaticCsrfValidator(True), captcha=captcha).handle(
        make_request(method=method)
    )

    assert isinstance(result, MethodError)
    assert result.status_code == 405
    captcha.verify.assert_not_called()
    assert transport.sent == []


async def test__captcha_error_codes(
    config: Configuration, transport: RecordingTransport, captcha_provider: FakeCaptchaProvider
) -> None:
    captcha_provider.response = {"success": False, "error-codes": ["invalid-input-response"]}
    config = replace(config, captcha_secret="secret", captcha_verify_url=captcha_provider.url)
    csrf = StaticCsrfValidator(True)

    result = await ContactPipeline(replace(config, check_csrf=True), transport, csrf).handle(
        make_request(captcha_token="token", csrf_token="csrf")
    )

    assert isinstance(result, VerificationError)
    assert result.status_code == 403
    assert "invalid-input-response" in result.message
    assert result.body()["captchaErrors"] == ["invalid-input-response"]
    assert captcha_provider.requests == [{"secret": "secret", "response": "token", "remoteip": "10.0.0.1"}]
    assert csrf.tokens == []
    assert transport.sent == []


async def test__captcha_success(
    config: Configuration, transport: RecordingTransport, captcha_provider: FakeCaptchaProvider
) -> None:
    config = replace(config, captcha_secret="secret", captcha_verify_url=captcha_provider.url)

    result = await ContactPipeline(config, transport, StaticCsrfValidator(False)).handle(
        make_request(captcha_token="token")
    )

    assert isinstance(result, Success)
    assert len(captcha_provider.requests) == 1
    assert len(transport.sent) == 2


async def test__csrf_invalid(config: Configuration, transport: RecordingTransport) -> None:
    result = await ContactPipeline(replace(config, check_csrf=True), transport, StaticCsrfValidator(False)).handle(
        make_request(csrf_token="token")
    )

    assert isinstance(result, VerificationError)
    assert result.status_code == 403
    assert transport.sent == []


async def test__csrf_without_token(config: Configuration, transport: RecordingTransport) -> None:
    result = await ContactPipeline(replace(config, check_csrf=True), transport, StaticCsrfValidator(True)).handle(
        make_request()
    )

    assert isinstance(result, ConfigurationError)
    assert result.status_code == 500
    assert transport.sent == []


async def test__csrf_valid(config: Configuration, transport: RecordingTransport) -> None:
    result = await ContactPipeline(replace(config, check_csrf=True), transport, StaticCsrfValidator(True)).handle(
        make_request(csrf_token="token")
    )

    assert isinstance(result, Success)


@pytest.mark.parametrize(
    "form,message",
    [
        ({"message": "Hello there"}, MISSING_FIELDS),
        ({"email": "", "message": "Hello there"}, MISSING_FIELDS),
        ({"email": "test@example.com"}, MISSING_FIELDS),
        ({"email": "not-an-email", "message": "Hello there"}, INVALID_EMAIL),
    ],
)
async def test__invalid_submission(
    config: Configuration, transport: RecordingTransport, form: dict[str, str], message: str
) -> None:
    result = await ContactPipeline(config, transport, StaticCsrfValidator(True)).handle(make_request(form=form))

    assert isinstance(result, ClientInputError)
    assert result.status_code == 422
    assert result.message == message
    assert transport.sent == []


async def test__default_name(config: Configuration, transport: RecordingTransport) -> None:
    form = {"email": "test@example.com", "message": "Hello there"}

    result = await ContactPipeline(config, transport, StaticCsrfValidator(True)).handle(make_request(form=form))

    assert isinstance(result, Success)
    assert all("somebody" in message.body for message in transport.sent)
    assert transport.sent[0].subject == "Message from somebody via example.com"


async def test__owner_delivery_fails(config: Configuration, transport: RecordingTransport) -> None:
    transport.results = [DeliveryResult.failed("SMTP connect() failed.")]

    result = await ContactPipeline(config, transport, StaticCsrfValidator(True)).handle(make_request())

    assert isinstance(result, DeliveryError)
    assert result.status_code == 500
    assert result.body() == {"status": "error", "message": "Error: SMTP connect() failed."}
    assert len(transport.sent) == 1


async def test__confirmation_is_best_effort(config: Configuration, transport: RecordingTransport) -> None:
    transport.results = [DeliveryResult.ok(), DeliveryResult.failed("mailbox unavailable")]

    result = await ContactPipeline(config, transport, StaticCsrfValidator(True)).handle(make_request())

    assert isinstance(result, Success)
    assert len(transport.sent) == 2


async def test__confirmation_required(config: Configuration, transport: RecordingTransport) -> None:
    transport.results = [DeliveryResult.ok(), DeliveryResult.failed("mailbox unavailable")]

    result = await ContactPipeline(
        replace(config, confirmation_required=True), transport, StaticCsrfValidator(True)
    ).handle(make_request())

    assert isinstance(result, DeliveryError)
    assert result.message == "Error: mailbox unavailable"
    assert len(transport.sent) == 2


async def test__multiline_name(config: Configuration, transport: RecordingTransport) -> None:
    form = FORM | {"name": "Jane\r\nBcc: victim@example.org"}

    result = await ContactPipeline(config, transport, StaticCsrfValidator(True)).handle(make_request(form=form))

    assert isinstance(result, Success)
    assert len(transport.sent) == 2
    assert transport.sent[0].subject == "Message from Jane Bcc: victim@example.org via example.com"
    assert all("\n" not in message.subject and "\r" not in message.subject for message in transport.sent)
