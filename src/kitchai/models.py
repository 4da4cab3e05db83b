"""
KitchAI Discovery - Data models.

Plain dataclasses shared by every stage of the engine. Inputs (pantry
entries, recipe candidates, interaction events) are treated as read-only
snapshots; derived values (match results, profiles, score breakdowns) are
computed per request and never persisted here.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from kitchai.tools.normalize import name_key


class UnitCategory(str, Enum):
    """Measurement family an ingredient or unit belongs to."""

    LIQUID = "liquid"
    WEIGHT = "weight"
    COUNT = "count"
    OTHER = "other"


class Lane(str, Enum):
    """Feed lane a candidate is classified into before weighting."""

    PERSONALIZED = "personalized"
    TRENDING = "trending"
    FOLLOWING = "following"
    DISCOVERY = "discovery"


class InteractionType(str, Enum):
    LIKE = "like"
    SAVE = "save"
    COMMENT = "comment"
    VIEW = "view"


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO string or datetime into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported timestamp: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# =============================================================================
# Ingredients
# =============================================================================


@dataclass(frozen=True)
class IngredientToken:
    """Normalized ingredient identity from the reference table."""

    canonical_name: str
    category: UnitCategory
    default_unit: str

    @property
    def key(self) -> str:
        """Identity used for set comparisons (singular, cleaned)."""
        return name_key(self.canonical_name)

    def __str__(self) -> str:
        return self.canonical_name


@dataclass
class NormalizedIngredient:
    """Output of normalize(): token plus quantity in the category's base unit."""

    raw_name: str
    raw_unit: str | None
    token: IngredientToken | None
    quantity: float | None
    unit: str
    unit_category: UnitCategory
    confidence: float
    match_type: str  # "exact" | "alias" | "partial" | "fuzzy" | "fallback" | "unknown"
    unit_assumed: bool = False  # Unit string was not recognized
    category_mismatch: bool = False  # Unit family differs from the ingredient's

    @property
    def is_unknown(self) -> bool:
        return self.token is None

    @property
    def is_low_confidence(self) -> bool:
        return self.unit_assumed or self.match_type in ("fallback", "unknown")


@dataclass
class PantryEntry:
    """A single pantry item owned by a user."""

    ingredient_name: str
    quantity: float | Decimal | str | None = 1.0
    unit: str = "units"

    @classmethod
    def from_dict(cls, row: dict) -> "PantryEntry":
        return cls(
            ingredient_name=row.get("ingredient_name") or row.get("item_name") or row.get("name") or "",
            quantity=row.get("quantity"),
            unit=row.get("unit") or "units",
        )


@dataclass
class RecipeIngredient:
    """One line of a recipe's ingredient list."""

    name: str
    quantity: float | str | None = None
    unit: str | None = None

    @classmethod
    def from_value(cls, value: Any) -> "RecipeIngredient":
        # Recipe rows store either plain strings or {name, quantity, unit} objects
        if isinstance(value, str):
            return cls(name=value)
        return cls(
            name=value.get("name", ""),
            quantity=value.get("quantity"),
            unit=value.get("unit"),
        )


# =============================================================================
# Recipes & interactions
# =============================================================================


@dataclass
class RecipeCandidate:
    """A community recipe eligible for the feed."""

    id: str
    creator_id: str
    created_at: datetime
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    title: str = ""
    description: str | None = None
    video_url: str | None = None
    is_ai_generated: bool = False
    is_public: bool = True
    likes: int = 0
    saves: int = 0
    comments: int = 0
    views: int = 0

    @property
    def has_playable_media(self) -> bool:
        return bool(self.video_url and self.video_url.strip())

    @classmethod
    def from_dict(cls, row: dict) -> "RecipeCandidate":
        return cls(
            id=str(row["id"]),
            creator_id=str(row.get("creator_id") or row.get("user_id") or ""),
            created_at=parse_timestamp(row["created_at"]),
            ingredients=[RecipeIngredient.from_value(i) for i in row.get("ingredients") or []],
            title=row.get("title") or row.get("name") or "",
            description=row.get("description"),
            video_url=row.get("video_url"),
            is_ai_generated=bool(row.get("is_ai_generated", False)),
            is_public=bool(row.get("is_public", True)),
            likes=int(row.get("likes") or row.get("likes_count") or 0),
            saves=int(row.get("saves") or row.get("saves_count") or 0),
            comments=int(row.get("comments_count") or row.get("comments") or 0),
            views=int(row.get("views") or row.get("views_count") or 0),
        )


@dataclass
class InteractionEvent:
    """A single user interaction with a recipe."""

    interaction_type: InteractionType
    created_at: datetime
    recipe_id: str | None = None

    @classmethod
    def from_dict(cls, row: dict) -> "InteractionEvent":
        return cls(
            interaction_type=InteractionType(row["interaction_type"]),
            created_at=parse_timestamp(row["created_at"]),
            recipe_id=row.get("recipe_id"),
        )


# =============================================================================
# Derived values
# =============================================================================


@dataclass
class MatchResult:
    """Pantry coverage of a recipe. Ingredient lists are plain display strings."""

    match_percentage: int = 0
    matched_ingredients: list[str] = field(default_factory=list)
    missing_ingredients: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "match_percentage": self.match_percentage,
            "matched_ingredients": [str(n) for n in self.matched_ingredients],
            "missing_ingredients": [str(n) for n in self.missing_ingredients],
        }


@dataclass
class BehaviorProfile:
    """Compact summary of a user's recent interactions."""

    user_id: str
    like_rate: float = 0.1
    save_rate: float = 0.05
    comment_frequency: int = 0
    following_count: int = 0
    engagement_score: float = 0.0
    interaction_count: int = 0

    @property
    def has_history(self) -> bool:
        return self.interaction_count > 0

    def to_dict(self) -> dict:
        return {
            "like_rate": round(self.like_rate, 4),
            "save_rate": round(self.save_rate, 4),
            "comment_frequency": self.comment_frequency,
            "following_count": self.following_count,
            "engagement_score": round(self.engagement_score, 4),
        }


@dataclass
class ScoreBreakdown:
    """Per-candidate sub-scores and the lane they place it in."""

    recipe_id: str
    engagement_velocity: float
    personalization_score: float
    freshness_score: float
    quality_score: float
    composite_score: float
    lane: Lane
    hours_since_creation: float = 0.0
    following_creator: bool = False

    def to_dict(self) -> dict:
        return {
            "engagement_velocity": round(self.engagement_velocity, 2),
            "personalization_score": round(self.personalization_score, 2),
            "freshness_score": round(self.freshness_score, 2),
            "quality_score": round(self.quality_score, 2),
            "algorithm_score": round(self.composite_score, 2),
            "feed_type": self.lane.value,
        }


@dataclass(frozen=True)
class WeightProfile:
    """Lane weights for one request. Validated by the weight policy."""

    personalized: float
    trending: float
    discovery: float

    def to_dict(self) -> dict:
        return {
            "personalized": self.personalized,
            "trending": self.trending,
            "discovery": self.discovery,
        }


@dataclass
class FeedItem:
    """A ranked recipe with its diagnostics."""

    recipe: RecipeCandidate
    breakdown: ScoreBreakdown
    position: int
    match: MatchResult | None = None


@dataclass
class FeedPage:
    """One page of the discovery feed."""

    items: list[FeedItem]
    weights: WeightProfile
    time_context: str
    profile: BehaviorProfile
    seed: int
    offset: int
    limit: int
    algorithm_version: str

    @property
    def recipe_ids(self) -> list[str]:
        return [item.recipe.id for item in self.items]
