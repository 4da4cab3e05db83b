"""
KitchAI Discovery - Supabase Data Source.

Reads the discovery snapshot from the app's Supabase tables:
- stock: pantry items (item_name, quantity, unit)
- recipe_uploads: community recipes
- user_interactions: likes, saves, comments, views
- user_follows: follower_id -> followed_id

recipe_uploads carries no like/save/comment totals; those are counted
from user_interactions (likes), saved_recipe_videos and recipe_comments.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from postgrest.exceptions import APIError
from supabase import Client, create_client

from kitchai.config import settings
from kitchai.db.adapter import RecipeFilters
from kitchai.errors import (
    BadRequestError,
    ConfigurationError,
    DataUnavailableError,
    RecipeNotFoundError,
    TransientFetchError,
)
from kitchai.models import InteractionEvent, PantryEntry, RecipeCandidate

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = (
    "id, user_id, title, description, video_url, ingredients, created_at, "
    "is_public, is_ai_generated, views_count"
)

# Error codes caused by the request itself: Postgres data exceptions
# (22P02 invalid uuid text) and PostgREST request errors
CLIENT_ERROR_PREFIXES = ("22", "PGRST1")
# Undefined table/column or a stale schema cache; retrying will not help
SCHEMA_ERROR_PREFIXES = ("42", "PGRST2")

# Singleton client instance
_client: Client | None = None


def get_client() -> Client:
    """
    Get the Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


class SupabaseDataSource:
    """DiscoveryDataSource backed by Supabase/PostgREST."""

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_client()
        return self._client

    def _execute(self, source: str, query: Callable[[], Any]) -> list[dict]:
        try:
            response = query()
        except APIError as e:
            code = str(e.code or "")
            if code.startswith(CLIENT_ERROR_PREFIXES):
                logger.warning(f"Supabase rejected query on {source} ({code}): {e.message}")
                raise BadRequestError(f"Invalid request to {source}: {e.message}") from e
            logger.error(f"Supabase query on {source} failed ({code}): {e.message}")
            if code.startswith(SCHEMA_ERROR_PREFIXES):
                raise DataUnavailableError(
                    f"Failed to read {source}: {e.message}", source=source, transient=False
                ) from e
            raise TransientFetchError(f"Failed to read {source}: {e.message}", source=source) from e
        except Exception as e:
            # Network errors from the HTTP client
            logger.error(f"Supabase request to {source} failed: {e}")
            raise TransientFetchError(f"Failed to read {source}: {e}", source=source) from e
        return response.data or []

    def _count_by_recipe(self, table: str, recipe_ids: list[str], **filters: str) -> Counter[str]:
        def _query():
            query = self.client.table(table).select("recipe_id").in_("recipe_id", recipe_ids)
            for column, value in filters.items():
                query = query.eq(column, value)
            return query.execute()

        rows = self._execute(table, _query)
        return Counter(str(row["recipe_id"]) for row in rows if row.get("recipe_id"))

    def _with_engagement(self, rows: list[dict]) -> list[dict]:
        """Attach likes/saves/comments totals to recipe rows."""
        recipe_ids = [str(row["id"]) for row in rows if row.get("id")]
        if not recipe_ids:
            return rows

        # PostgREST caps each response (1000 rows by default), so totals for
        # very popular pages saturate at that cap
        likes = self._count_by_recipe("user_interactions", recipe_ids, interaction_type="like")
        saves = self._count_by_recipe("saved_recipe_videos", recipe_ids)
        comments = self._count_by_recipe("recipe_comments", recipe_ids)

        for row in rows:
            recipe_id = str(row.get("id"))
            row["likes_count"] = likes[recipe_id]
            row["saves_count"] = saves[recipe_id]
            row["comments_count"] = comments[recipe_id]
        return rows

    # =========================================================================
    # Pantry
    # =========================================================================

    def fetch_pantry(self, user_id: str) -> list[PantryEntry]:
        rows = self._execute(
            "stock",
            lambda: self.client.table("stock")
            .select("item_name, quantity, unit")
            .eq("user_id", user_id)
            .execute(),
        )
        return [PantryEntry.from_dict(row) for row in rows]

    # =========================================================================
    # Recipes
    # =========================================================================

    def fetch_eligible_recipes(self, filters: RecipeFilters) -> list[RecipeCandidate]:
        since = (datetime.now(timezone.utc) - timedelta(days=filters.max_age_days)).isoformat()

        def _query():
            query = (
                self.client.table("recipe_uploads")
                .select(RECIPE_COLUMNS)
                .eq("is_ai_generated", False)
                .gte("created_at", since)
            )
            if not filters.include_private:
                query = query.eq("is_public", True)
            return query.order("created_at", desc=True).limit(filters.limit).execute()

        rows = self._with_engagement(self._execute("recipe_uploads", _query))
        candidates = []
        for row in rows:
            try:
                candidates.append(RecipeCandidate.from_dict(row))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed recipe row {row.get('id')}: {e}")
        return candidates

    def fetch_recipe(self, recipe_id: str) -> RecipeCandidate:
        rows = self._execute(
            "recipe_uploads",
            lambda: self.client.table("recipe_uploads")
            .select(RECIPE_COLUMNS)
            .eq("id", recipe_id)
            .limit(1)
            .execute(),
        )
        if not rows:
            raise RecipeNotFoundError(recipe_id)
        return RecipeCandidate.from_dict(self._with_engagement(rows)[0])

    # =========================================================================
    # Interactions & follows
    # =========================================================================

    def fetch_interactions(self, user_id: str, window_days: int) -> list[InteractionEvent]:
        since = (datetime.now(timezone.utc) - timedelta(days=window_days)).isoformat()
        rows = self._execute(
            "user_interactions",
            lambda: self.client.table("user_interactions")
            .select("interaction_type, recipe_id, created_at")
            .eq("user_id", user_id)
            .gte("created_at", since)
            .execute(),
        )
        events = []
        for row in rows:
            try:
                events.append(InteractionEvent.from_dict(row))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed interaction for {user_id}: {e}")
        return events

    def fetch_following_count(self, user_id: str) -> int:
        return len(self.fetch_followed_creator_ids(user_id))

    def fetch_followed_creator_ids(self, user_id: str) -> set[str]:
        rows = self._execute(
            "user_follows",
            lambda: self.client.table("user_follows")
            .select("followed_id")
            .eq("follower_id", user_id)
            .execute(),
        )
        return {str(row["followed_id"]) for row in rows if row.get("followed_id")}
