from typing import Any, Dict, Optional

import httpx
import logging

from travelplan.core.config import ApiSettings
from travelplan.core.errors import (
    AuthError,
    BadRequestError,
    ConfigError,
    MalformedResponseError,
    PlanValidationError,
    ProviderError,
    RateLimitedError,
    UnknownProviderError,
)
from travelplan.services.gemini.cooldown import Cooldown, get_shared_cooldown

logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 30_000
DEFAULT_GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 4000,
}


class GeminiClient:
    """Thin async wrapper around the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_s: float = 30.0,
        cooldown: Optional[Cooldown] = None,
        generation_config: Optional[Dict[str, Any]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.cooldown = cooldown or get_shared_cooldown()
        self.generation_config = dict(generation_config or DEFAULT_GENERATION_CONFIG)
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(timeout_s, connect=10.0),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTPX client."""

        await self._client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._client.aclose()

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the text of the first candidate."""

        if not self.api_key:
            raise ConfigError("Gemini API key not configured. Please check your environment variables.")
        if not prompt or len(prompt) > MAX_PROMPT_CHARS:
            raise PlanValidationError("Invalid prompt: too long or empty")

        await self.cooldown.wait()

        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.generation_config,
        }
        logger.info("Sending request to Gemini model %s (prompt length %d)", self.model, len(prompt))

        try:
            response = await self._client.post(
                f"/models/{self.model}:generateContent",
                json=body,
                headers={"x-goog-api-key": self.api_key},
            )
        except httpx.HTTPError as exc:
            logger.error("Gemini request to model %s failed: %s", self.model, type(exc).__name__)
            raise UnknownProviderError(
                f"Gemini API request failed: {type(exc).__name__}",
                provider_message=str(exc),
            ) from exc

        if not response.is_success:
            raise _classify_failure(response)

        return _extract_text(response)


def _classify_failure(response: httpx.Response) -> ProviderError:
    """Map a non-success HTTP response onto the provider error taxonomy."""

    status = response.status_code
    raw = response.text
    logger.error("Gemini API error response (%s): %s", status, raw)

    if status == 429:
        return RateLimitedError(
            "Gemini API rate limit exceeded. Please wait a few minutes and try again.",
            status=status,
            provider_message=raw,
        )
    if status == 400:
        return BadRequestError(f"Gemini API bad request: {raw}", status=status, provider_message=raw)
    if status in (401, 403):
        return AuthError(
            "Gemini API key invalid or quota exceeded. Please check your API key.",
            status=status,
            provider_message=raw,
        )
    return UnknownProviderError(
        f"Gemini API error: {status} - {response.reason_phrase}",
        status=status,
        provider_message=raw,
    )


def _extract_text(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            "Invalid response from Gemini AI", status=response.status_code, provider_message=response.text
        ) from exc

    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError(
            "Invalid response from Gemini AI", status=response.status_code, provider_message=response.text
        ) from exc

    if not isinstance(text, str) or not text:
        raise MalformedResponseError(
            "Invalid response from Gemini AI", status=response.status_code, provider_message=response.text
        )
    return text


def create_gemini_client(settings: ApiSettings) -> GeminiClient:
    """Instantiate the Gemini client using project settings.

    The key is not enforced here; a missing key surfaces as ``ConfigError`` on
    the first ``generate`` call, so mock mode keeps working without one.
    """

    return GeminiClient(
        settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_s=settings.request_timeout_s,
        cooldown=get_shared_cooldown(settings.cooldown_ms / 1000),
    )
