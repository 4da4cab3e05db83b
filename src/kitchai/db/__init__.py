"""
KitchAI Discovery - Data sources.

Read-only snapshot access for the engine. The Supabase implementation
lives in kitchai.db.client and is imported on demand.
"""

from kitchai.db.adapter import DiscoveryDataSource, RecipeFilters
from kitchai.db.memory import InMemoryDataSource

__all__ = [
    "DiscoveryDataSource",
    "InMemoryDataSource",
    "RecipeFilters",
]
