"""
Pytest configuration and fixtures for KitchAI Discovery tests.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment before importing kitchai modules
os.environ["KITCHAI_ENV"] = "development"
os.environ.pop("COMPOSITE_WEIGHTS", None)

from kitchai.db.memory import InMemoryDataSource  # noqa: E402
from kitchai.engine.feed import DiscoveryEngine  # noqa: E402
from kitchai.models import (  # noqa: E402
    InteractionEvent,
    InteractionType,
    PantryEntry,
    RecipeCandidate,
    RecipeIngredient,
)

NOW = datetime(2025, 1, 20, 18, 30, tzinfo=timezone.utc)


def make_recipe(
    recipe_id: str,
    hours_old: float = 12,
    creator_id: str = "creator-1",
    ingredients: list[str] | None = None,
    now: datetime = NOW,
    **kwargs,
) -> RecipeCandidate:
    """Build a recipe created `hours_old` hours before `now`."""
    return RecipeCandidate(
        id=recipe_id,
        creator_id=creator_id,
        created_at=now - timedelta(hours=hours_old),
        ingredients=[RecipeIngredient(name) for name in (ingredients or [])],
        title=kwargs.pop("title", recipe_id),
        **kwargs,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def caesar_ingredients():
    """Caesar salad ingredient names."""
    return ["chicken breast", "romaine lettuce", "croutons", "parmesan cheese", "salt"]


@pytest.fixture
def sample_pantry():
    """Pantry holding parmesan and salt."""
    return [
        PantryEntry("parmesan cheese", 200, "g"),
        PantryEntry("salt", 1, "kg"),
    ]


@pytest.fixture
def sample_recipes(caesar_ingredients):
    """A small mixed pool of community recipes."""
    return [
        make_recipe(
            "r-caesar",
            hours_old=6,
            ingredients=caesar_ingredients,
            description="A classic Caesar salad with crisp romaine and shaved parmesan.",
            video_url="https://cdn.example.com/caesar.mp4",
            likes=40,
            saves=10,
            comments=5,
        ),
        make_recipe(
            "r-pancakes",
            hours_old=30,
            creator_id="creator-2",
            ingredients=["flour", "milk", "eggs", "butter", "sugar", "baking powder"],
            description="Fluffy buttermilk pancakes",
            likes=12,
            saves=3,
        ),
        make_recipe(
            "r-pasta",
            hours_old=200,
            creator_id="creator-3",
            ingredients=["spaghetti", "olive oil", "garlic", "chili flakes"],
            likes=300,
            saves=80,
            comments=20,
        ),
        make_recipe(
            "r-toast",
            hours_old=2,
            creator_id="creator-4",
            ingredients=["bread", "avocado"],
        ),
        make_recipe(
            "r-curry",
            hours_old=60,
            creator_id="creator-2",
            ingredients=["chickpeas", "onions", "garlic", "cumin", "turmeric", "tomatoes"],
            description="Weeknight chickpea curry",
            video_url="https://cdn.example.com/curry.mp4",
            likes=25,
            saves=9,
            comments=2,
        ),
    ]


@pytest.fixture
def ai_recipe():
    """An AI-generated recipe that must never reach the feed."""
    return make_recipe("r-ai", hours_old=1, creator_id="kitchai-bot", is_ai_generated=True, likes=999)


@pytest.fixture
def sample_interactions():
    """A moderately active user's recent interactions."""
    return [
        InteractionEvent(InteractionType.LIKE, NOW - timedelta(days=1), "r-pasta"),
        InteractionEvent(InteractionType.LIKE, NOW - timedelta(days=3), "r-curry"),
        InteractionEvent(InteractionType.SAVE, NOW - timedelta(days=5), "r-curry"),
        InteractionEvent(InteractionType.COMMENT, NOW - timedelta(days=10), "r-pasta"),
        InteractionEvent(InteractionType.LIKE, NOW - timedelta(days=120), "r-old"),
    ]


@pytest.fixture
def memory_source(sample_pantry, sample_recipes, ai_recipe, sample_interactions):
    """In-memory data source with one active user (u1) and one new user (u2)."""
    return InMemoryDataSource(
        pantry={"u1": sample_pantry},
        recipes=sample_recipes + [ai_recipe],
        interactions={"u1": sample_interactions},
        follows={"u1": {"creator-2"}},
        now=NOW,
    )


@pytest.fixture
def engine(memory_source):
    """Discovery engine over the in-memory source."""
    return DiscoveryEngine(memory_source)
