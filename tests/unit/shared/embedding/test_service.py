"""
Unit tests for embedding service.

Tests key handling, truncation and error mapping with a mocked OpenAI client.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from shared.embedding.config import EmbeddingSettings
from shared.embedding.service import EmbeddingService
from shared.exceptions import EmbeddingError, MissingCredentialError, NoResponseError


def credentials(key: str = "test-key"):
    return MagicMock(openai_api_key=key)


@pytest.fixture
def mock_openai_client():
    """Create a mock OpenAI client."""
    client = MagicMock()
    client.embeddings.create = AsyncMock(
        return_value=SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2, 0.3])])
    )
    return client


@pytest.fixture
def embedding_service(mock_openai_client):
    """Create embedding service with mocked OpenAI client."""
    service = EmbeddingService(
        settings=EmbeddingSettings(max_input_chars=10),
        credentials_loader=lambda: credentials(),
    )
    service.client_for = MagicMock(return_value=mock_openai_client)
    return service


class TestEmbeddingService:
    """Tests for EmbeddingService.embed."""

    @pytest.mark.asyncio
    async def test_returns_vector(self, embedding_service, mock_openai_client):
        """Test successful embedding returns the first vector."""
        vector = await embedding_service.embed("hello")

        assert vector == [0.1, 0.2, 0.3]
        embedding_service.client_for.assert_called_once_with("test-key")
        kwargs = mock_openai_client.embeddings.create.await_args.kwargs
        assert kwargs["model"] == "text-embedding-3-small"
        assert "dimensions" not in kwargs

    @pytest.mark.asyncio
    async def test_truncates_input(self, embedding_service, mock_openai_client):
        """Test input is cut to max_input_chars."""
        await embedding_service.embed("abcdefghijklmnop")

        assert mock_openai_client.embeddings.create.await_args.kwargs["input"] == "abcdefghij"

    @pytest.mark.asyncio
    async def test_dimensions_forwarded(self, mock_openai_client):
        """Test configured dimensions are sent."""
        service = EmbeddingService(
            settings=EmbeddingSettings(dimensions=512),
            credentials_loader=lambda: credentials(),
        )
        service.client_for = MagicMock(return_value=mock_openai_client)

        await service.embed("hello")

        assert mock_openai_client.embeddings.create.await_args.kwargs["dimensions"] == 512

    @pytest.mark.asyncio
    async def test_missing_key(self):
        """Test missing key raises before any request."""
        service = EmbeddingService(
            settings=EmbeddingSettings(), credentials_loader=lambda: credentials("")
        )

        with pytest.raises(MissingCredentialError) as exc_info:
            await service.embed("hello")

        assert exc_info.value.key_name == "OPENAI_API_KEY"

    @pytest.mark.asyncio
    async def test_api_error_mapped(self, embedding_service, mock_openai_client):
        """Test SDK errors become EmbeddingError."""
        request = httpx.Request("POST", "https://api.openai.com/v1/embeddings")
        mock_openai_client.embeddings.create.side_effect = openai.APIConnectionError(
            request=request
        )

        with pytest.raises(EmbeddingError):
            await embedding_service.embed("hello")

    @pytest.mark.asyncio
    async def test_empty_response(self, embedding_service, mock_openai_client):
        """Test an empty data list is a NoResponseError."""
        mock_openai_client.embeddings.create.return_value = SimpleNamespace(data=[])

        with pytest.raises(NoResponseError):
            await embedding_service.embed("hello")


class TestClientLifecycle:
    """Tests for SDK client management."""

    def test_client_reused_for_same_key(self):
        service = EmbeddingService(settings=EmbeddingSettings())

        first = service.client_for("key-1")

        assert service.client_for("key-1") is first
        assert service.client_for("key-2") is not first

    @pytest.mark.asyncio
    async def test_close_resets_client(self):
        service = EmbeddingService(settings=EmbeddingSettings())
        client = MagicMock()
        client.close = AsyncMock()
        service._client = client
        service._client_key = "key"

        await service.close()

        client.close.assert_awaited_once()
        assert service._client is None
