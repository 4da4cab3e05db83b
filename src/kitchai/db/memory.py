"""
KitchAI Discovery - In-memory Data Source.

Snapshot-backed DiscoveryDataSource for tests and the CLI. A fixture file
is a JSON object:

    {
      "pantry": {"<user_id>": [{"item_name": "salt", "quantity": 1, "unit": "g"}]},
      "recipes": [{"id": "r1", "user_id": "c1", "created_at": "...", ...}],
      "interactions": {"<user_id>": [{"interaction_type": "like", "created_at": "..."}]},
      "follows": {"<user_id>": ["c1"]}
    }
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from kitchai.db.adapter import RecipeFilters
from kitchai.errors import DataUnavailableError, RecipeNotFoundError
from kitchai.models import InteractionEvent, PantryEntry, RecipeCandidate

logger = logging.getLogger(__name__)


class InMemoryDataSource:
    """DiscoveryDataSource over plain Python collections."""

    def __init__(
        self,
        pantry: dict[str, list[PantryEntry]] | None = None,
        recipes: list[RecipeCandidate] | None = None,
        interactions: dict[str, list[InteractionEvent]] | None = None,
        follows: dict[str, set[str]] | None = None,
        now: datetime | None = None,
    ):
        self.pantry = pantry or {}
        self.recipes = recipes or []
        self.interactions = interactions or {}
        self.follows = follows or {}
        self.now = now

    def _now(self) -> datetime:
        return self.now or datetime.now(timezone.utc)

    @classmethod
    def from_dict(cls, data: dict, now: datetime | None = None) -> "InMemoryDataSource":
        return cls(
            pantry={
                user_id: [PantryEntry.from_dict(row) for row in rows]
                for user_id, rows in (data.get("pantry") or {}).items()
            },
            recipes=[RecipeCandidate.from_dict(row) for row in data.get("recipes") or []],
            interactions={
                user_id: [InteractionEvent.from_dict(row) for row in rows]
                for user_id, rows in (data.get("interactions") or {}).items()
            },
            follows={user_id: set(ids) for user_id, ids in (data.get("follows") or {}).items()},
            now=now,
        )

    @classmethod
    def from_json(cls, path: str | Path, now: datetime | None = None) -> "InMemoryDataSource":
        """Load a fixture file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise DataUnavailableError(
                f"Cannot load fixture {path}: {e}", source=str(path), transient=False
            ) from e
        return cls.from_dict(data, now=now)

    # =========================================================================
    # DiscoveryDataSource
    # =========================================================================

    def fetch_pantry(self, user_id: str) -> list[PantryEntry]:
        return list(self.pantry.get(user_id, []))

    def fetch_eligible_recipes(self, filters: RecipeFilters) -> list[RecipeCandidate]:
        cutoff = self._now() - timedelta(days=filters.max_age_days)
        eligible = [
            r for r in self.recipes
            if not r.is_ai_generated
            and (filters.include_private or r.is_public)
            and r.created_at >= cutoff
        ]
        eligible.sort(key=lambda r: r.created_at, reverse=True)
        return eligible[:filters.limit]

    def fetch_recipe(self, recipe_id: str) -> RecipeCandidate:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        raise RecipeNotFoundError(recipe_id)

    def fetch_interactions(self, user_id: str, window_days: int) -> list[InteractionEvent]:
        cutoff = self._now() - timedelta(days=window_days)
        return [e for e in self.interactions.get(user_id, []) if e.created_at >= cutoff]

    def fetch_following_count(self, user_id: str) -> int:
        return len(self.follows.get(user_id, set()))

    def fetch_followed_creator_ids(self, user_id: str) -> set[str]:
        return set(self.follows.get(user_id, set()))
