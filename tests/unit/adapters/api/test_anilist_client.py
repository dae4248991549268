"""
Tests for AniListClient - AniList GraphQL client implementation.

Uses respx to mock httpx calls and verifies:
- Search returns MediaMatch objects with every consumed field
- The query text is sent as a GraphQL variable
- Cache is checked BEFORE API calls (cache-first pattern)
- Error classification (item-local vs provider unavailable)
"""

import json
from datetime import date
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from anilib.adapters.api.anilist_client import AniListClient
from anilib.adapters.api.cache import APICache
from anilib.core.errors import ExternalLookupError, ProviderUnavailableError
from anilib.core.ports.api_clients import IMetadataProvider, MediaMatch
from tests.fixtures.anilist_responses import (
    ANILIST_EMPTY_RESPONSE,
    ANILIST_ERROR_RESPONSE,
    ANILIST_PARTIAL_RESPONSE,
    ANILIST_SEARCH_RESPONSE,
    ANILIST_UNTITLED_RESPONSE,
    ANILIST_URL,
    make_match,
)


@pytest.fixture
def mock_cache() -> AsyncMock:
    """Mock APICache for testing."""
    cache = AsyncMock(spec=APICache)
    cache.get.return_value = None  # Cache miss by default
    return cache


@pytest.fixture
def anilist_client(mock_cache: AsyncMock) -> AniListClient:
    """AniListClient with mocked cache and no retry delay."""
    return AniListClient(cache=mock_cache, max_attempts=1)


class TestAniListClientInterface:
    """Test AniListClient implements IMetadataProvider correctly."""

    def test_implements_interface(self, anilist_client: AniListClient):
        assert isinstance(anilist_client, IMetadataProvider)

    def test_source_property_returns_anilist(self, anilist_client: AniListClient):
        assert anilist_client.source == "anilist"


class TestAniListSearch:
    """Tests for AniListClient.search()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_returns_media_matches(self, anilist_client: AniListClient):
        """search() should parse every consumed field."""
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_SEARCH_RESPONSE)
        )

        results = await anilist_client.search("Cowboy Bebop", limit=5)

        assert len(results) == 2
        assert all(isinstance(r, MediaMatch) for r in results)
        first = results[0]
        assert first.id == 1
        assert first.title.romaji == "Cowboy Bebop"
        assert first.title.native == "カウボーイビバップ"
        assert first.cover_url.endswith("bx1.jpg")
        assert first.episodes == 26
        assert first.release_date == date(1998, 4, 3)
        assert first.status == "FINISHED"
        assert first.genres == ("Action", "Adventure", "Drama", "Sci-Fi")
        assert first.format == "TV"

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_sends_query_as_variable(self, anilist_client: AniListClient):
        """The search text is never interpolated into the GraphQL document."""
        route = respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_EMPTY_RESPONSE)
        )

        await anilist_client.search('Steins"Gate', limit=3)

        body = json.loads(route.calls.last.request.content)
        assert body["variables"] == {"search": 'Steins"Gate', "perPage": 3}
        assert 'Steins"Gate' not in body["query"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_empty_results(self, anilist_client: AniListClient):
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_EMPTY_RESPONSE)
        )

        assert await anilist_client.search("NonExistentAnime12345") == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_tolerates_partial_media(self, anilist_client: AniListClient):
        """Missing english title, cover, episode count and month/day are tolerated."""
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_PARTIAL_RESPONSE)
        )

        [match] = await anilist_client.search("Frieren")

        assert match.title.english is None
        assert match.title.romaji == "Sousou no Frieren"
        assert match.cover_url is None
        assert match.episodes is None
        assert match.genres == ()
        assert match.release_date == date(2023, 1, 1)

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_skips_media_without_title(self, anilist_client: AniListClient):
        """A media with every title variant null cannot become an Anime."""
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_UNTITLED_RESPONSE)
        )

        results = await anilist_client.search("Cowboy Bebop")

        assert [r.id for r in results] == [1]


class TestAniListCache:
    """Cache-first behavior."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_cache_hit_skips_api_call(
        self, anilist_client: AniListClient, mock_cache: AsyncMock
    ):
        cached = [make_match(1, romaji="Cowboy Bebop")]
        mock_cache.get.return_value = cached
        route = respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_SEARCH_RESPONSE)
        )

        results = await anilist_client.search("Cowboy Bebop", limit=5)

        assert results == cached
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_cache_miss_stores_results(
        self, anilist_client: AniListClient, mock_cache: AsyncMock
    ):
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_SEARCH_RESPONSE)
        )

        results = await anilist_client.search("Cowboy Bebop", limit=5)

        mock_cache.set_search.assert_awaited_once_with(
            APICache.search_key("anilist", "Cowboy Bebop", 5), results
        )

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_search_is_not_cached(
        self, anilist_client: AniListClient, mock_cache: AsyncMock
    ):
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_ERROR_RESPONSE)
        )

        with pytest.raises(ExternalLookupError):
            await anilist_client.search("Cowboy Bebop")

        mock_cache.set_search.assert_not_awaited()


class TestAniListErrors:
    """Error classification."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_graphql_errors_raise_external_lookup_error(
        self, anilist_client: AniListClient
    ):
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(200, json=ANILIST_ERROR_RESPONSE)
        )

        with pytest.raises(ExternalLookupError, match="invalid value"):
            await anilist_client.search("Cowboy Bebop")

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_error_raises_external_lookup_error(
        self, anilist_client: AniListClient
    ):
        respx.post(ANILIST_URL).mock(return_value=httpx.Response(400))

        with pytest.raises(ExternalLookupError):
            await anilist_client.search("Cowboy Bebop")

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_payload_raises_external_lookup_error(
        self, anilist_client: AniListClient
    ):
        respx.post(ANILIST_URL).mock(return_value=httpx.Response(200, json={"data": None}))

        with pytest.raises(ExternalLookupError, match="malformee"):
            await anilist_client.search("Cowboy Bebop")

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json_raises_external_lookup_error(
        self, anilist_client: AniListClient
    ):
        respx.post(ANILIST_URL).mock(return_value=httpx.Response(200, text="<html>"))

        with pytest.raises(ExternalLookupError):
            await anilist_client.search("Cowboy Bebop")

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_raises_provider_unavailable(
        self, anilist_client: AniListClient
    ):
        respx.post(ANILIST_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(ProviderUnavailableError):
            await anilist_client.search("Cowboy Bebop")

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_raises_provider_unavailable_with_retry_after(
        self, anilist_client: AniListClient
    ):
        respx.post(ANILIST_URL).mock(
            return_value=httpx.Response(429, headers={"Retry-After": "60"})
        )

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await anilist_client.search("Cowboy Bebop")

        assert exc_info.value.retry_after == 60

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_raises_provider_unavailable(
        self, anilist_client: AniListClient
    ):
        respx.post(ANILIST_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(ProviderUnavailableError):
            await anilist_client.search("Cowboy Bebop")

    @pytest.mark.asyncio
    async def test_close_is_safe_without_client(self, anilist_client: AniListClient):
        await anilist_client.close()
