"""Tests for the unified LLM client."""

from unittest.mock import AsyncMock

import pytest

from shared.exceptions import (
    AllProvidersFailedError,
    EmbeddingError,
    ProviderRequestError,
    ServerError,
)
from shared.llm import LLMClient, LLMProvider, LLMSettings, ResponseCache
from shared.llm.retry import RetryPolicy

SIMPLE_PROMPT = "Say hello"
MODERATE_PROMPT = "Lunch on 1/2 maybe"


@pytest.fixture
def two_provider_client(make_provider, make_embeddings):
    """Client whose tiers are served by separate scripted providers."""

    def build(gemini_reply, claude_reply):
        gemini = make_provider(lambda system, user, schema: gemini_reply)
        claude = make_provider(lambda system, user, schema: claude_reply)
        client = LLMClient(
            settings=LLMSettings(),
            embedding_service=make_embeddings(),
            providers={LLMProvider.GEMINI_FLASH: gemini, LLMProvider.CLAUDE_HAIKU: claude},
            cache=ResponseCache(),
            retry_policy=RetryPolicy(max_attempts=3, initial_delay_ms=0, jitter=0.0),
            sleep=AsyncMock(),
        )
        return client, gemini, claude

    return build


class TestCaching:
    """Tests for cache behavior."""

    @pytest.mark.asyncio
    async def test_exact_hit_skips_network(self, make_client):
        client, provider = make_client(lambda system, user, schema: '{"ok": true}')

        first = await client.invoke("system", SIMPLE_PROMPT)
        second = await client.invoke("system", SIMPLE_PROMPT)

        assert first == second == '{"ok": true}'
        assert len(provider.calls) == 1
        stats = client.get_stats()
        assert stats.total == 2
        assert stats.cache_hits == 1

    @pytest.mark.asyncio
    async def test_exact_hit_skips_embedding(self, make_client, fake_embeddings):
        client, _ = make_client(lambda system, user, schema: "reply", fake_embeddings)

        await client.invoke("system", SIMPLE_PROMPT)
        embeds_after_first = len(fake_embeddings.calls)
        await client.invoke("system", SIMPLE_PROMPT)

        assert len(fake_embeddings.calls) == embeds_after_first

    @pytest.mark.asyncio
    async def test_semantic_hit_for_similar_prompt(self, make_client, fake_embeddings):
        fake_embeddings.vectors = {
            "Dinner with Sam on Friday": [1.0, 0.0, 0.0],
            "Dinner with Sam Friday": [0.99, 0.05, 0.0],
        }
        client, provider = make_client(lambda system, user, schema: "cached", fake_embeddings)

        await client.invoke("system", "Dinner with Sam on Friday")
        result = await client.invoke("system", "Dinner with Sam Friday")

        assert result == "cached"
        assert len(provider.calls) == 1
        assert client.get_stats().semantic_hits == 1

    @pytest.mark.asyncio
    async def test_semantic_miss_for_unrelated_prompt(self, make_client, fake_embeddings):
        fake_embeddings.vectors = {
            "Dinner with Sam on Friday": [1.0, 0.0, 0.0],
            "Renew passport": [0.0, 1.0, 0.0],
        }
        client, provider = make_client(lambda system, user, schema: "fresh", fake_embeddings)

        await client.invoke("system", "Dinner with Sam on Friday")
        await client.invoke("system", "Renew passport")

        assert len(provider.calls) == 2
        assert client.get_stats().semantic_hits == 0

    @pytest.mark.asyncio
    async def test_cache_disabled(self, make_client, fake_embeddings):
        client, provider = make_client(lambda system, user, schema: "reply", fake_embeddings)

        await client.invoke("system", SIMPLE_PROMPT, use_cache=False)
        await client.invoke("system", SIMPLE_PROMPT, use_cache=False)

        assert len(provider.calls) == 2
        assert fake_embeddings.calls == []

    @pytest.mark.asyncio
    async def test_embedding_failure_still_answers(self, make_client, make_embeddings):
        embeddings = make_embeddings(error=EmbeddingError("endpoint down"))
        client, provider = make_client(lambda system, user, schema: "reply", embeddings)

        first = await client.invoke("system", SIMPLE_PROMPT)
        second = await client.invoke("system", SIMPLE_PROMPT)

        assert first == second == "reply"
        assert len(provider.calls) == 1


class TestRoutingAndFallback:
    """Tests for retries and provider fallback."""

    @pytest.mark.asyncio
    async def test_simple_prompt_uses_cheapest_provider(self, two_provider_client):
        client, gemini, claude = two_provider_client("from gemini", "from claude")

        assert await client.invoke("system", SIMPLE_PROMPT) == "from gemini"
        assert claude.calls == []

    @pytest.mark.asyncio
    async def test_falls_back_after_retries(self, two_provider_client):
        client, gemini, claude = two_provider_client(ServerError(500), "from claude")

        result = await client.invoke("system", MODERATE_PROMPT)

        assert result == "from claude"
        assert len(gemini.calls) == 3
        assert len(claude.calls) == 1

    @pytest.mark.asyncio
    async def test_non_retryable_error_falls_back_immediately(self, two_provider_client):
        client, gemini, claude = two_provider_client(ProviderRequestError(400), "from claude")

        assert await client.invoke("system", MODERATE_PROMPT) == "from claude"
        assert len(gemini.calls) == 1

    @pytest.mark.asyncio
    async def test_simple_prompt_has_no_fallback(self, two_provider_client):
        client, gemini, claude = two_provider_client(ServerError(503), "from claude")

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await client.invoke("system", SIMPLE_PROMPT)

        assert list(exc_info.value.errors) == [LLMProvider.GEMINI_FLASH.value]
        assert claude.calls == []

    @pytest.mark.asyncio
    async def test_all_providers_failed(self, two_provider_client):
        client, gemini, claude = two_provider_client(ServerError(500), ServerError(502))

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await client.invoke("system", MODERATE_PROMPT)

        assert set(exc_info.value.errors) == {
            LLMProvider.GEMINI_FLASH.value,
            LLMProvider.CLAUDE_HAIKU.value,
        }
        assert len(gemini.calls) == 3
        assert len(claude.calls) == 3

    @pytest.mark.asyncio
    async def test_failed_call_is_not_cached(self, two_provider_client):
        client, _, _ = two_provider_client(ServerError(500), ServerError(500))

        with pytest.raises(AllProvidersFailedError):
            await client.invoke("system", MODERATE_PROMPT)

        assert await client.cache.size() == 0


class TestInvokeOptions:
    """Tests for temperature, schema and compression options."""

    @pytest.mark.asyncio
    async def test_default_temperature_and_schema_forwarded(self, make_client):
        client, provider = make_client(lambda system, user, schema: "{}")

        await client.invoke("system", SIMPLE_PROMPT, schema={"type": "object"})

        assert provider.calls[0]["schema"] == {"type": "object"}
        assert provider.calls[0]["temperature"] == LLMSettings().default_temperature

    @pytest.mark.asyncio
    async def test_compression_shrinks_long_prompt(self, make_client):
        client, provider = make_client(lambda system, user, schema: "ok")
        filler = ". ".join(f"Filler sentence number {index} here" for index in range(600))
        prompt = f"Meeting on Friday at 3pm. {filler}"

        await client.invoke("system", prompt, use_compression=True)

        sent = provider.calls[0]["user"]
        assert sent.startswith("Meeting on Friday at 3pm")
        assert len(sent.split()) < len(prompt.split())


class TestStats:
    """Tests for LLMStats."""

    def test_hit_rate_zero_without_calls(self, make_client):
        client, _ = make_client(lambda system, user, schema: "ok")

        assert client.get_stats().hit_rate == 0.0

    @pytest.mark.asyncio
    async def test_hit_rate(self, make_client):
        client, _ = make_client(lambda system, user, schema: "ok")

        await client.invoke("system", SIMPLE_PROMPT)
        await client.invoke("system", SIMPLE_PROMPT)

        assert client.get_stats().hit_rate == 0.5
