"""
Tests for the data sources.

Tests cover:
- SupabaseDataSource queries against a mocked client
- Error classification (bad request / schema / transient)
- InMemoryDataSource fixture loading
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from kitchai.db.adapter import DiscoveryDataSource, RecipeFilters
from kitchai.db.client import RECIPE_COLUMNS, SupabaseDataSource
from kitchai.db.memory import InMemoryDataSource
from kitchai.engine.feed import DiscoveryEngine
from kitchai.errors import (
    BadRequestError,
    DataUnavailableError,
    RecipeNotFoundError,
    TransientFetchError,
)
from kitchai.web.app import app
from kitchai.web.routes import get_engine


def make_table(rows: list[dict] | None = None, error: Exception | None = None) -> MagicMock:
    """Chainable table mock; execute() returns rows or raises error."""
    table = MagicMock()
    for method in ("select", "eq", "gte", "in_", "order", "limit"):
        getattr(table, method).return_value = table
    if error is not None:
        table.execute.side_effect = error
    else:
        table.execute.return_value = MagicMock(data=rows or [])
    return table


def api_error(code: str, message: str = "query failed") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


@pytest.fixture
def tables():
    return {}


@pytest.fixture
def mock_supabase(tables):
    """Mock Supabase client; unknown tables return no rows."""
    client = MagicMock()
    client.table.side_effect = lambda name: tables.setdefault(name, make_table())
    return client


@pytest.fixture
def source(mock_supabase):
    return SupabaseDataSource(mock_supabase)


RECIPE_ROWS = [
    {
        "id": "r1",
        "user_id": "creator-1",
        "title": "Caesar Salad",
        "created_at": "2025-01-20T06:00:00Z",
        "ingredients": ["romaine lettuce", {"name": "parmesan", "quantity": "50", "unit": "g"}],
        "is_public": True,
        "is_ai_generated": False,
        "views_count": 12,
    },
    {
        "id": "r2",
        "user_id": "creator-2",
        "title": "Pancakes",
        "created_at": "2025-01-19T06:00:00Z",
        "is_public": True,
        "is_ai_generated": False,
    },
]


class TestSupabaseQueries:
    """Table access and engagement totals."""

    def test_implements_protocol(self, source):
        assert isinstance(source, DiscoveryDataSource)

    def test_recipe_select_uses_stored_columns_only(self, source, tables):
        tables["recipe_uploads"] = make_table([])
        source.fetch_eligible_recipes(RecipeFilters())

        tables["recipe_uploads"].select.assert_called_once_with(RECIPE_COLUMNS)
        for derived in ("likes_count", "saves_count", "comments_count"):
            assert derived not in RECIPE_COLUMNS
        tables["recipe_uploads"].eq.assert_any_call("is_ai_generated", False)
        tables["recipe_uploads"].eq.assert_any_call("is_public", True)

    def test_engagement_counted_from_related_tables(self, source, tables):
        tables["recipe_uploads"] = make_table([dict(row) for row in RECIPE_ROWS])
        tables["user_interactions"] = make_table([{"recipe_id": "r1"}, {"recipe_id": "r1"}, {"recipe_id": "r2"}])
        tables["saved_recipe_videos"] = make_table([{"recipe_id": "r2"}])
        tables["recipe_comments"] = make_table([{"recipe_id": "r1"}])

        candidates = {c.id: c for c in source.fetch_eligible_recipes(RecipeFilters())}

        assert (candidates["r1"].likes, candidates["r1"].saves, candidates["r1"].comments) == (2, 0, 1)
        assert (candidates["r2"].likes, candidates["r2"].saves, candidates["r2"].comments) == (1, 1, 0)
        assert candidates["r1"].views == 12
        tables["user_interactions"].eq.assert_called_with("interaction_type", "like")
        tables["saved_recipe_videos"].in_.assert_called_with("recipe_id", ["r1", "r2"])

    def test_no_recipes_skips_count_queries(self, source, tables, mock_supabase):
        tables["recipe_uploads"] = make_table([])
        assert source.fetch_eligible_recipes(RecipeFilters()) == []
        assert [c.args[0] for c in mock_supabase.table.call_args_list] == ["recipe_uploads"]

    def test_fetch_recipe(self, source, tables):
        tables["recipe_uploads"] = make_table([dict(RECIPE_ROWS[0])])
        tables["saved_recipe_videos"] = make_table([{"recipe_id": "r1"}])
        recipe = source.fetch_recipe("r1")
        assert recipe.title == "Caesar Salad"
        assert recipe.saves == 1
        assert recipe.ingredients[1].name == "parmesan"

    def test_missing_recipe(self, source, tables):
        tables["recipe_uploads"] = make_table([])
        with pytest.raises(RecipeNotFoundError):
            source.fetch_recipe("r-missing")

    def test_pantry_rows(self, source, tables):
        tables["stock"] = make_table([{"item_name": "Olive Oil", "quantity": "400.00", "unit": "ml"}])
        pantry = source.fetch_pantry("u1")
        assert pantry[0].ingredient_name == "Olive Oil"
        assert pantry[0].quantity == "400.00"
        tables["stock"].eq.assert_called_with("user_id", "u1")

    def test_followed_creators(self, source, tables):
        tables["user_follows"] = make_table([{"followed_id": "c1"}, {"followed_id": "c2"}, {"followed_id": None}])
        assert source.fetch_followed_creator_ids("u1") == {"c1", "c2"}
        assert source.fetch_following_count("u1") == 2


class TestSupabaseErrors:
    """PostgREST failures map onto the error taxonomy."""

    def test_invalid_uuid_is_bad_request(self, source, tables):
        tables["recipe_uploads"] = make_table(
            error=api_error("22P02", 'invalid input syntax for type uuid: "not-a-uuid"')
        )
        with pytest.raises(BadRequestError) as exc_info:
            source.fetch_recipe("not-a-uuid")
        assert not isinstance(exc_info.value, DataUnavailableError)

    def test_request_error_is_bad_request(self, source, tables):
        tables["stock"] = make_table(error=api_error("PGRST100", "failed to parse filter"))
        with pytest.raises(BadRequestError):
            source.fetch_pantry("u1")

    @pytest.mark.parametrize("code", ["42703", "PGRST204"])
    def test_schema_error_is_not_transient(self, source, tables, code):
        tables["recipe_uploads"] = make_table(error=api_error(code, "column does not exist"))
        with pytest.raises(DataUnavailableError) as exc_info:
            source.fetch_eligible_recipes(RecipeFilters())
        assert exc_info.value.transient is False
        assert exc_info.value.source == "recipe_uploads"

    def test_server_error_is_transient(self, source, tables):
        tables["user_interactions"] = make_table(error=api_error("57014", "canceling statement due to statement timeout"))
        with pytest.raises(TransientFetchError):
            source.fetch_interactions("u1", 90)

    def test_network_error_is_transient(self, source, tables):
        tables["user_follows"] = make_table(error=ConnectionError("connection reset"))
        with pytest.raises(TransientFetchError) as exc_info:
            source.fetch_followed_creator_ids("u1")
        assert exc_info.value.transient is True

    def test_invalid_recipe_id_is_http_400(self, source, tables):
        tables["recipe_uploads"] = make_table(error=api_error("22P02", "invalid input syntax for type uuid"))
        app.dependency_overrides[get_engine] = lambda: DiscoveryEngine(source)
        try:
            response = TestClient(app).get("/api/recipes/not-a-uuid/pantry-match", params={"user_id": "u1"})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 400
        assert "Retry-After" not in response.headers


class TestInMemorySource:

    def test_broken_fixture_is_not_transient(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(DataUnavailableError) as exc_info:
            InMemoryDataSource.from_json(path)
        assert exc_info.value.transient is False

    def test_missing_fixture(self, tmp_path):
        with pytest.raises(DataUnavailableError):
            InMemoryDataSource.from_json(tmp_path / "missing.json")
