# newsbubble/reasoner.py
from __future__ import annotations

from typing import Optional

import openai
from openai import OpenAI
from openai.types.chat import ChatCompletion

from .logging_setup import get_logger

logger = get_logger("newsbubble.reasoner")


class ReasonerUnavailable(Exception):
    """
    The reasoning service could not produce a reply: no credentials, network
    error, timeout, or a non-2xx status (402 quota and 429 rate limit included).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ReasoningClient:
    """
    One synchronous chat completion per call, no retries.
    `client` can be passed in directly (tests, custom gateways); otherwise it is
    built lazily from the credentials on first use.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: float = 45.0,
        client: Optional[OpenAI] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise ReasonerUnavailable("reasoning service is not configured (OPENAI_API_KEY missing)")
        self._client = OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )
        return self._client

    def complete(self, system: str, user: str) -> str:
        client = self._get_client()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                temperature=0.3,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                timeout=self.timeout,
            )
        except openai.APIStatusError as e:
            # body is deliberately not inspected; 402/429 are plain failures
            logger.warning("REASONER_STATUS_ERROR", extra={"status_code": e.status_code, "model": self.model})
            raise ReasonerUnavailable(f"reasoning service returned HTTP {e.status_code}", e.status_code) from e
        except openai.APITimeoutError as e:
            logger.warning("REASONER_TIMEOUT", extra={"timeout_s": self.timeout, "model": self.model})
            raise ReasonerUnavailable("reasoning service timed out") from e
        except openai.OpenAIError as e:
            logger.warning("REASONER_CALL_FAILED", extra={"error": type(e).__name__, "model": self.model})
            raise ReasonerUnavailable(f"reasoning service call failed: {type(e).__name__}") from e

        # A 2xx with a non-JSON body (proxy error page) comes back as a bare str
        if not isinstance(resp, ChatCompletion):
            logger.warning("REASONER_UNREADABLE_REPLY", extra={"reply_type": type(resp).__name__, "model": self.model})
            raise ReasonerUnavailable("reasoning service returned an unreadable reply")
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""
