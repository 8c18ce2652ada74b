import asyncio
from typing import Any, Protocol

import aiohttp

from ..config import Configuration
from ..exceptions.contact import NetworkError, VerificationError
from ..logger import get_logger
from .verification import VerificationResult


logger = get_logger(__name__)


class CaptchaVerifier(Protocol):
    async def verify(self, token: str, remote_ip: str) -> VerificationResult:
        ...


class SkipCaptchaVerifier:
    """Used if no captcha provider is configured. Every request passes."""

    async def verify(self, token: str, remote_ip: str) -> VerificationResult:
        return VerificationResult.passed()


class HttpCaptchaVerifier:
    """
    Server side verification of a captcha response token.

    Works with every provider that implements the reCAPTCHA `siteverify` protocol (reCAPTCHA, hCaptcha, Turnstile):
    the token is posted as a form together with the secret and the client ip, and the provider answers with a JSON
    object containing `success` and optionally `error-codes`.
    """

    def __init__(self, secret: str, verify_url: str, timeout: float = 10) -> None:
        self.secret = secret
        self.verify_url = verify_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def _post(self, token: str, remote_ip: str) -> Any:
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(
                self.verify_url, data={"secret": self.secret, "response": token, "remoteip": remote_ip}
            ) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)

    async def verify(self, token: str, remote_ip: str) -> VerificationResult:
        try:
            data = await self._post(token, remote_ip)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"Captcha verification request to {self.verify_url} failed: {e!r}")
            return VerificationResult.failed(NetworkError(), "network-error")

        logger.debug(f"Captcha response: {data}")
        if not isinstance(data, dict):
            return VerificationResult.failed(NetworkError(), "invalid-response")

        if error_codes := data.get("error-codes"):
            codes = [str(code) for code in error_codes] if isinstance(error_codes, list) else [str(error_codes)]
            logger.info(f"Captcha verification failed: {', '.join(codes)}")
            return VerificationResult.failed(
                VerificationError(f"CAPTCHA verification failed: {', '.join(codes)}", captchaErrors=codes), *codes
            )

        if data.get("success") is not True:
            logger.info("Captcha verification failed")
            return VerificationResult.failed(VerificationError())

        return VerificationResult.passed()


def verifier_for(config: Configuration) -> CaptchaVerifier:
    if not config.captcha_enabled:
        return SkipCaptchaVerifier()
    return HttpCaptchaVerifier(config.captcha_secret, config.captcha_verify_url, config.captcha_timeout)
