"""
Embedding service for vector generation.

Turns text into embedding vectors through the OpenAI embeddings API.
"""

from typing import Any

from openai import AsyncOpenAI, OpenAIError

from shared.config.credentials import get_credentials
from shared.embedding.config import EmbeddingSettings, get_embedding_settings
from shared.exceptions import EmbeddingError, MissingCredentialError, NoResponseError


class EmbeddingService:
    """
    Service for generating text embeddings using OpenAI.

    The API key is read on every call; the SDK client is rebuilt when it
    changes.
    """

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        credentials_loader=get_credentials,
    ):
        """
        Initialize embedding service.

        Args:
            settings: Embedding settings (uses defaults if not provided)
            credentials_loader: Callable returning current ProviderCredentials
        """
        self.settings = settings or get_embedding_settings()
        self.credentials_loader = credentials_loader
        self._client: AsyncOpenAI | None = None
        self._client_key: str | None = None

    def client_for(self, api_key: str) -> AsyncOpenAI:
        """
        Get or create the OpenAI client for a key.

        Args:
            api_key: OpenAI API key

        Returns:
            AsyncOpenAI client instance
        """
        if self._client is None or self._client_key != api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                max_retries=0,
                timeout=self.settings.timeout,
            )
            self._client_key = api_key
        return self._client

    async def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for a single text.

        Args:
            text: Text to embed (truncated to max_input_chars)

        Returns:
            Embedding vector

        Raises:
            MissingCredentialError: If OPENAI_API_KEY is not set
            NoResponseError: If the response carries no vector
            EmbeddingError: If the API request fails
        """
        api_key = self.credentials_loader().openai_api_key
        if not api_key:
            raise MissingCredentialError("OPENAI_API_KEY")

        truncated = text[: self.settings.max_input_chars]
        request: dict[str, Any] = {"model": self.settings.model, "input": truncated}
        if self.settings.dimensions:
            request["dimensions"] = self.settings.dimensions

        try:
            response = await self.client_for(api_key).embeddings.create(**request)
        except OpenAIError as e:
            raise EmbeddingError(f"OpenAI API error: {e}") from e

        if not response.data or not response.data[0].embedding:
            raise NoResponseError("Empty embedding response")

        return list(response.data[0].embedding)

    async def close(self) -> None:
        """Close the OpenAI client connection."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._client_key = None
