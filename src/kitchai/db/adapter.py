"""
Discovery Data Source Protocol.

The engine reads a per-request snapshot through this interface and never
writes. Implementations:
- SupabaseDataSource (kitchai.db.client): production backend
- InMemoryDataSource (kitchai.db.memory): fixtures for tests and the CLI

Contract for implementations:
- Expected-empty results are empty lists / 0, not errors
- Fetch failures raise DataUnavailableError (TransientFetchError when retrying may help)
- fetch_recipe raises RecipeNotFoundError for an unknown or hidden id
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from kitchai.models import InteractionEvent, PantryEntry, RecipeCandidate


@dataclass(frozen=True)
class RecipeFilters:
    """Candidate pool filters. AI-generated recipes are always excluded."""

    max_age_days: int = 90
    include_private: bool = False
    limit: int = 500


@runtime_checkable
class DiscoveryDataSource(Protocol):
    """Read-only access to pantry, recipe, and interaction data."""

    def fetch_pantry(self, user_id: str) -> list[PantryEntry]:
        """All pantry entries owned by the user."""
        ...

    def fetch_eligible_recipes(self, filters: RecipeFilters) -> list[RecipeCandidate]:
        """Human-authored recipes matching the filters."""
        ...

    def fetch_recipe(self, recipe_id: str) -> RecipeCandidate:
        """A single recipe by id."""
        ...

    def fetch_interactions(self, user_id: str, window_days: int) -> list[InteractionEvent]:
        """The user's interactions within the trailing window."""
        ...

    def fetch_following_count(self, user_id: str) -> int:
        ...

    def fetch_followed_creator_ids(self, user_id: str) -> set[str]:
        ...
