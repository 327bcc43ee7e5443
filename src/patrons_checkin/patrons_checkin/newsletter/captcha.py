from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from ..core.constants import DEFAULT_RECAPTCHA_THRESHOLD, RECAPTCHA_VERIFY_URL

logger = logging.getLogger(__name__)


class CaptchaVerifier(Protocol):
    def verify(self, token: str) -> bool:
        raise NotImplementedError


class RecaptchaVerifier(CaptchaVerifier):
    """reCAPTCHA v3: a token passes when Google scores it above ``threshold``."""

    def __init__(
        self,
        secret: str,
        *,
        threshold: float = DEFAULT_RECAPTCHA_THRESHOLD,
        verify_url: str = RECAPTCHA_VERIFY_URL,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._secret = secret
        self._threshold = threshold
        self._verify_url = verify_url
        self._timeout = timeout
        self._transport = transport

    def verify(self, token: str) -> bool:
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            response = client.post(self._verify_url, data={"secret": self._secret, "response": token})
            response.raise_for_status()
            data = response.json()

        score = float(data.get("score") or 0.0)
        passed = bool(data.get("success")) and score > self._threshold
        if not passed:
            logger.info(
                "Recaptcha rejected. [score: %s, threshold: %s, errors: %s]",
                score,
                self._threshold,
                data.get("error-codes"),
            )
        return passed
