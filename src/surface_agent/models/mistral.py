"""Mistral chat-completions client with rate-limit backoff and circuit breaker."""

import random
import time
from typing import Any, Callable

import httpx
import pybreaker

from ..core import get_logger, extract_json, JSONParseError
from .config import ProviderConfig
from .errors import LLMError, LLMErrorCode
from .provider import ResponseFormat

logger = get_logger(__name__)

# Largest slice of model output carried in error details
MAX_CONTENT_IN_DETAILS = 500


class BreakerListener(pybreaker.CircuitBreakerListener):
    """Logs circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=str(old_state),
            to_state=str(new_state),
        )


def parse_retry_after(value: str | None) -> float | None:
    """Retry-After header in seconds (HTTP-date form is ignored)."""
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


class MistralClient:
    """
    Synchronous chat client.

    Connection failures count towards the circuit breaker; HTTP 429 responses
    are retried with exponential backoff (or the server's Retry-After) up to
    ``max_retries`` times and never trip the breaker.
    """

    def __init__(
        self,
        config: ProviderConfig,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not config.api_key:
            raise LLMError(
                LLMErrorCode.MISSING_API_KEY,
                "Mistral API key is required. Set MISTRAL_API_KEY or pass api_key in the config.",
            )

        self.config = config
        self._sleep = sleep
        self._client = http_client or httpx.Client(timeout=config.timeout)
        self._breaker = pybreaker.CircuitBreaker(
            fail_max=config.breaker_fail_max,
            reset_timeout=config.breaker_reset_timeout,
            name="llm-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", model=config.model_name, url=config.base_url)

    @property
    def url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/chat/completions"

    def calculate_backoff(self, attempt: int, retry_after: float | None = None) -> float:
        """Delay in seconds before retry ``attempt`` (0-indexed)."""
        if retry_after is not None:
            return retry_after
        delay = self.config.base_delay * (2**attempt)
        return delay + random.random() * 0.3 * delay

    def _payload(self, system_prompt: str, user_prompt: str, response_format: ResponseFormat) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.config.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.config.temperature,
            "stream": False,
        }
        if response_format == "json":
            payload["response_format"] = {"type": "json_object"}
        return payload

    def _send(self, payload: dict[str, Any]) -> httpx.Response:
        return self._client.post(
            self.url,
            json=payload,
            headers={
                "Authorization": f"Bearer {self.config.api_key}",
                "Accept": "application/json",
            },
        )

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        try:
            return self._breaker.call(self._send, payload)
        except pybreaker.CircuitBreakerError as e:
            logger.error("llm_unavailable", error="Circuit breaker open")
            raise LLMError(
                LLMErrorCode.LLM_CONNECTION,
                "LLM provider unavailable (circuit open)",
                {"originalError": str(e), "circuit": "open"},
            ) from e
        except httpx.HTTPError as e:
            logger.warning("llm_http_error", error=str(e))
            raise LLMError(
                LLMErrorCode.LLM_CONNECTION,
                str(e) or "Failed to connect to LLM",
                {"originalError": repr(e)},
            ) from e

    def chat(
        self, system_prompt: str, user_prompt: str, response_format: ResponseFormat = "json"
    ) -> dict[str, Any]:
        """
        Send one chat request.

        Returns:
            Parsed JSON object, or ``{"content": text}`` for text format

        Raises:
            LLMError: RATE_LIMITED, LLM_CONNECTION, EMPTY_RESPONSE or JSON_PARSE_ERROR
        """
        payload = self._payload(system_prompt, user_prompt, response_format)

        for attempt in range(self.config.max_retries + 1):
            response = self._post(payload)

            if response.status_code == 429:
                retry_after = parse_retry_after(response.headers.get("retry-after"))
                if attempt < self.config.max_retries:
                    delay = self.calculate_backoff(attempt, retry_after)
                    logger.warning(
                        "llm_rate_limited",
                        attempt=attempt + 1,
                        max_retries=self.config.max_retries,
                        next_retry_in=delay,
                    )
                    self._sleep(delay)
                    continue
                raise LLMError(
                    LLMErrorCode.RATE_LIMITED,
                    "Rate limit exceeded after maximum retries",
                    {
                        "retryAfter": retry_after,
                        "attempts": attempt + 1,
                        "maxRetries": self.config.max_retries,
                    },
                )

            if response.is_error:
                raise LLMError(
                    LLMErrorCode.LLM_CONNECTION,
                    f"LLM request failed with status {response.status_code}",
                    {"status": response.status_code, "body": response.text[:MAX_CONTENT_IN_DETAILS]},
                )

            return self._parse(response, response_format)

        # max_retries + 1 iterations always return or raise
        raise AssertionError("unreachable")

    def _parse(self, response: httpx.Response, response_format: ResponseFormat) -> dict[str, Any]:
        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None

        if not content:
            raise LLMError(
                LLMErrorCode.EMPTY_RESPONSE,
                "LLM returned an empty response",
                {"status": response.status_code},
            )

        if response_format != "json":
            return {"content": content}

        try:
            return extract_json(content, repair=False)
        except JSONParseError as e:
            logger.warning("llm_json_invalid", error=str(e))
            raise LLMError(
                LLMErrorCode.JSON_PARSE_ERROR,
                "Failed to parse LLM response as JSON",
                {"content": content[:MAX_CONTENT_IN_DETAILS], "parseError": str(e)},
            ) from e

    def close(self) -> None:
        self._client.close()
