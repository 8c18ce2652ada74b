from collections.abc import AsyncIterator
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from mailform.config import Configuration
from mailform.services.mailer import DeliveryResult
from mailform.utils.email import OutboundMessage
from mailform.utils.submission import Submission


class RecordingTransport:
    """Collects sent messages; answers with the queued results and succeeds once they run out."""

    def __init__(self) -> None:
        self.sent: list[OutboundMessage] = []
        self.results: list[DeliveryResult] = []

    async def send(self, message: OutboundMessage) -> DeliveryResult:
        self.sent.append(message)
        return self.results.pop(0) if self.results else DeliveryResult.ok()


class StaticCsrfValidator:
    def __init__(self, valid: bool) -> None:
        self.valid = valid
        self.tokens: list[str] = []

    def token_is_valid(self, token: str) -> bool:
        self.tokens.append(token)
        return self.valid


class FakeCaptchaProvider:
    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.response: Any = {"success": True}
        self.raw: str | None = None
        self.status = 200
        self.url = ""

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(dict(await request.post()))
        if self.raw is not None:
            return web.Response(text=self.raw, status=self.status)
        return web.json_response(self.response, status=self.status)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
async def captcha_provider() -> AsyncIterator[FakeCaptchaProvider]:
    provider = FakeCaptchaProvider()
    app = web.Application()
    app.router.add_post("/siteverify", provider.handle)

    server = TestServer(app)
    await server.start_server()
    provider.url = str(server.make_url("/siteverify"))
    yield provider
    await server.close()


@pytest.fixture
def config() -> Configuration:
    return Configuration(
        mailbox_email="owner@example.com",
        from_email="noreply@example.com",
        reply_to_email="support@example.com",
        site_domain="example.com",
        site_name="Example",
    )


@pytest.fixture
def submission() -> Submission:
    return Submission(email="test@example.com", message="Hello there", name="Jane")
