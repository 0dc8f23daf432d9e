"""
Unit tests for the search service and the search store it writes through.
"""

import pytest

from conftest import github_item, github_payload
from repo_finder.errors import KEYWORD_REQUIRED, STORE_FAILED, InvalidInput, PersistenceError, ProviderError
from repo_finder.services.search_service import SearchService
from repo_finder.storage.database import Database
from repo_finder.storage.search_store import SearchStore


async def stored_count(store: SearchStore) -> int:
    _, total = await store.list_searches()
    return total


class TestSearchValidation:
    """Keywords that trim to nothing never reach GitHub or the database."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keyword", [None, "", "   ", "\t\n"])
    async def test_blank_keyword_is_rejected(self, keyword, search_service, search_store, fake_github):
        with pytest.raises(InvalidInput, match=KEYWORD_REQUIRED):
            await search_service.search(keyword)

        assert fake_github.requests == []
        assert await stored_count(search_store) == 0

    @pytest.mark.asyncio
    async def test_single_character_keyword_is_accepted(self, search_service, fake_github):
        fake_github.respond(github_payload(10, 2))

        outcome = await search_service.search("c")

        assert outcome.record.keyword == "c"

    @pytest.mark.asyncio
    async def test_non_positive_paging_is_rejected(self, search_service, fake_github):
        with pytest.raises(InvalidInput):
            await search_service.search("golang", page=0)
        with pytest.raises(InvalidInput):
            await search_service.search("golang", per_page=0)

        assert fake_github.requests == []

    @pytest.mark.asyncio
    async def test_large_per_page_is_clamped_for_github(self, search_service, fake_github):
        fake_github.respond(github_payload(5000, 100))

        outcome = await search_service.search("react", per_page=150)

        assert fake_github.requests[0].url.params["per_page"] == "100"
        assert outcome.per_page == 150
        assert len(outcome.record.repository_data) == 100


class TestSearchSuccess:
    """A successful search stores exactly what the provider returned."""

    @pytest.mark.asyncio
    async def test_keyword_is_trimmed_before_query_and_storage(self, search_service, fake_github):
        fake_github.respond(github_payload(1, 1))

        outcome = await search_service.search("  golang  ")

        assert fake_github.requests[0].url.params["q"] == "golang"
        assert outcome.record.keyword == "golang"

    @pytest.mark.asyncio
    async def test_golang_scenario(self, search_service, search_store, fake_github):
        fake_github.respond(github_payload(12345, 6))

        outcome = await search_service.search("golang", per_page=6)

        assert len(outcome.record.repository_data) == 6
        assert outcome.record.total_count == 12345
        assert outcome.record.id is not None
        assert outcome.record.created_at is not None
        assert outcome.page == 1
        assert outcome.per_page == 6
        assert await stored_count(search_store) == 1

    @pytest.mark.asyncio
    async def test_total_count_is_independent_of_items(self, search_service, fake_github):
        fake_github.respond(github_payload(50000, 6))

        outcome = await search_service.search("react", per_page=6)

        assert outcome.record.total_count == 50000
        assert len(outcome.record.repository_data) == 6

    @pytest.mark.asyncio
    async def test_order_and_owner_are_preserved(self, search_service, search_store, fake_github):
        items = [
            github_item(9, "top", owner="alice"),
            github_item(3, "second", owner="bob"),
        ]
        fake_github.respond({"total_count": 2, "items": items})

        outcome = await search_service.search("ranked")
        records, _ = await search_store.list_searches()

        for repositories in (outcome.record.repository_data, records[0].repository_data):
            assert [repo.id for repo in repositories] == [9, 3]
            assert repositories[0].owner.login == "alice"
            assert repositories[0].owner.avatar_url == items[0]["owner"]["avatar_url"]
            assert repositories[1].owner.login == "bob"

    @pytest.mark.asyncio
    async def test_empty_result_is_still_stored(self, search_service, search_store, fake_github):
        fake_github.respond({"total_count": 0, "items": []})

        outcome = await search_service.search("zzzznothing")

        assert outcome.record.repository_data == []
        assert await stored_count(search_store) == 1

    @pytest.mark.asyncio
    async def test_search_data_echoes_paging(self, search_service, fake_github):
        fake_github.respond(github_payload(100, 4))

        data = (await search_service.search("vue", page=3, per_page=4)).to_data()

        assert data.current_page == 3
        assert data.per_page == 4
        assert data.keyword == "vue"
        assert len(data.repositories) == 4


class TestSearchFailures:
    """Failed searches leave nothing behind."""

    @pytest.mark.asyncio
    async def test_provider_failure_stores_nothing(self, search_service, search_store, fake_github):
        fake_github.respond({"message": "Service Unavailable"}, status=503)

        with pytest.raises(ProviderError, match="GitHub API error: 503"):
            await search_service.search("golang")

        assert await stored_count(search_store) == 0

    @pytest.mark.asyncio
    async def test_persistence_failure_fails_the_search(self, github_adapter, fake_github):
        # no tables created, so the insert fails
        database = Database("sqlite+aiosqlite:///:memory:")
        service = SearchService(github_adapter, SearchStore(database))
        fake_github.respond(github_payload(10, 3))
        try:
            with pytest.raises(PersistenceError, match=STORE_FAILED):
                await service.search("golang")
        finally:
            await database.dispose()

        assert len(fake_github.requests) == 1
