"""
Generation providers.

Each provider turns (system prompt, user prompt, optional JSON schema,
temperature) into response text, mapping transport failures onto the
model-access error taxonomy.
"""

import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import httpx
from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
)

from shared.config.credentials import ProviderCredentials, get_credentials
from shared.exceptions import (
    MissingCredentialError,
    NoResponseError,
    ProviderRequestError,
    RateLimitedError,
    ServerError,
)
from shared.llm.config import LLMSettings


class LLMProvider(str, Enum):
    """Generation providers, identified by model name."""

    GEMINI_FLASH = "gemini-2.0-flash-exp"
    CLAUDE_HAIKU = "claude-3-5-haiku-20241022"

    @property
    def cost_per_million_tokens(self) -> tuple[float, float]:
        """(input, output) USD per 1M tokens; used only to order routing chains."""
        return _COSTS[self]


_COSTS: dict[LLMProvider, tuple[float, float]] = {
    LLMProvider.GEMINI_FLASH: (0.075, 0.30),
    LLMProvider.CLAUDE_HAIKU: (0.80, 4.00),
}


def raise_for_status(status_code: int, provider: str, body: str = "") -> None:
    """
    Map an HTTP status onto the provider error taxonomy.

    Args:
        status_code: Response status
        provider: Provider name for error details
        body: Response body excerpt

    Raises:
        RateLimitedError: On 429
        ServerError: On 5xx
        ProviderRequestError: On any other 4xx
    """
    if status_code == 429:
        raise RateLimitedError(provider=provider)
    if status_code >= 500:
        raise ServerError(status_code, provider=provider)
    if status_code >= 400:
        raise ProviderRequestError(
            status_code,
            provider=provider,
            message=f"Malformed request ({status_code}): {body[:200]}",
        )


class BaseProvider(ABC):
    """Base class for generation providers."""

    name: LLMProvider

    def __init__(
        self,
        settings: LLMSettings,
        credentials_loader=get_credentials,
    ):
        """
        Initialize provider.

        Args:
            settings: LLM settings
            credentials_loader: Callable returning current ProviderCredentials
        """
        self.settings = settings
        self.credentials_loader = credentials_loader

    def credentials(self) -> ProviderCredentials:
        """Read credentials at call time."""
        return self.credentials_loader()

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None,
        temperature: float,
    ) -> str:
        """
        Make one generation request.

        Args:
            system_prompt: System instructions
            user_prompt: User message
            schema: Optional JSON response schema
            temperature: Sampling temperature

        Returns:
            Response text
        """

    async def close(self) -> None:
        """Release transport resources."""
        return None


class GeminiProvider(BaseProvider):
    """Gemini generateContent over REST."""

    name = LLMProvider.GEMINI_FLASH

    def __init__(
        self,
        settings: LLMSettings,
        credentials_loader=get_credentials,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Gemini provider.

        Args:
            settings: LLM settings
            credentials_loader: Callable returning current ProviderCredentials
            http_client: Optional preconfigured HTTP client
        """
        super().__init__(settings, credentials_loader)
        self._client = http_client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.request_timeout)
        return self._client

    def build_payload(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None,
        temperature: float,
    ) -> dict[str, Any]:
        """Build the generateContent request body."""
        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": self.settings.max_output_tokens,
        }
        if schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = schema

        return {
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "generationConfig": generation_config,
        }

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None,
        temperature: float,
    ) -> str:
        api_key = self.credentials().gemini_api_key
        if not api_key:
            raise MissingCredentialError("GEMINI_API_KEY")

        url = f"{self.settings.gemini_base_url}/models/{self.settings.gemini_model}:generateContent"
        payload = self.build_payload(system_prompt, user_prompt, schema, temperature)

        try:
            response = await self._get_client().post(url, params={"key": api_key}, json=payload)
        except (httpx.TimeoutException, httpx.TransportError) as e:
            raise ServerError(0, provider=self.name.value, message=f"Transport error: {e}") from e

        raise_for_status(response.status_code, self.name.value, response.text)

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0].get("text")
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise NoResponseError(details={"provider": self.name.value}) from e

        if not text:
            raise NoResponseError(details={"provider": self.name.value})
        return text

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class ClaudeProvider(BaseProvider):
    """Anthropic Messages API via the async SDK."""

    name = LLMProvider.CLAUDE_HAIKU

    def __init__(self, settings: LLMSettings, credentials_loader=get_credentials):
        """
        Initialize Claude provider.

        Args:
            settings: LLM settings
            credentials_loader: Callable returning current ProviderCredentials
        """
        super().__init__(settings, credentials_loader)
        self._client: AsyncAnthropic | None = None
        self._client_key: str | None = None

    def client_for(self, api_key: str) -> AsyncAnthropic:
        """
        Get the SDK client for a key, rebuilding it if the key changed.

        The SDK's own retries are disabled so the layer's retry policy governs.
        """
        if self._client is None or self._client_key != api_key:
            self._client = AsyncAnthropic(
                api_key=api_key,
                max_retries=0,
                timeout=self.settings.request_timeout,
            )
            self._client_key = api_key
        return self._client

    @staticmethod
    def system_with_schema(system_prompt: str, schema: dict[str, Any] | None) -> str:
        """Append a JSON-only instruction when a schema is requested."""
        if schema is None:
            return system_prompt
        return (
            f"{system_prompt}\n\n"
            "Respond with JSON only, no prose, matching this JSON schema:\n"
            f"{json.dumps(schema)}"
        )

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any] | None,
        temperature: float,
    ) -> str:
        api_key = self.credentials().anthropic_api_key
        if not api_key:
            raise MissingCredentialError("ANTHROPIC_API_KEY")

        try:
            response = await self.client_for(api_key).messages.create(
                model=self.settings.claude_model,
                max_tokens=self.settings.max_output_tokens,
                temperature=temperature,
                system=self.system_with_schema(system_prompt, schema),
                messages=[{"role": "user", "content": user_prompt}],
            )
        except (APITimeoutError, APIConnectionError) as e:
            raise ServerError(0, provider=self.name.value, message=f"Transport error: {e}") from e
        except APIStatusError as e:
            raise_for_status(e.status_code, self.name.value, str(e.message))
            raise

        for block in response.content:
            if block.type == "text" and block.text:
                return block.text

        raise NoResponseError(details={"provider": self.name.value})

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._client_key = None
