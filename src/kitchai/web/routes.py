"""
Discovery API endpoints.

Feed pages, single-recipe pantry matches, and ingredient normalization.
Ingredient arrays in every response are plain strings.
"""

from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from kitchai.db.client import SupabaseDataSource
from kitchai.engine.feed import DiscoveryEngine
from kitchai.engine.normalizer import get_normalizer
from kitchai.models import FeedItem, FeedPage, MatchResult, NormalizedIngredient

router = APIRouter(tags=["discovery"])


# =============================================================================
# Response Models
# =============================================================================


class MatchResponse(BaseModel):
    """Pantry coverage of one recipe."""
    match_percentage: int
    matched_ingredients: list[str]
    missing_ingredients: list[str]

    @classmethod
    def from_result(cls, result: MatchResult) -> "MatchResponse":
        return cls(**result.to_dict())


class FeedRecipe(BaseModel):
    """A feed entry: recipe fields plus score diagnostics."""
    id: str
    title: str
    description: str | None = None
    video_url: str | None = None
    creator_id: str
    created_at: str
    ingredients: list[str]
    likes_count: int
    saves_count: int
    comments_count: int
    following_creator: bool
    position: int
    scores: dict[str, Any]
    pantry_match: MatchResponse | None = None

    @classmethod
    def from_item(cls, item: FeedItem) -> "FeedRecipe":
        recipe = item.recipe
        return cls(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            video_url=recipe.video_url,
            creator_id=recipe.creator_id,
            created_at=recipe.created_at.isoformat(),
            ingredients=[i.name for i in recipe.ingredients],
            likes_count=recipe.likes,
            saves_count=recipe.saves,
            comments_count=recipe.comments,
            following_creator=item.breakdown.following_creator,
            position=item.position,
            scores=item.breakdown.to_dict(),
            pantry_match=MatchResponse.from_result(item.match) if item.match else None,
        )


class AlgorithmMetadata(BaseModel):
    """How the page was built."""
    weights: dict[str, float]
    time_context: str
    user_profile: dict[str, Any]
    session_seed: int
    offset: int
    limit: int
    ai_recipes_excluded: bool = True
    algorithm_version: str


class FeedResponse(BaseModel):
    recipes: list[FeedRecipe]
    algorithm_metadata: AlgorithmMetadata

    @classmethod
    def from_page(cls, page: FeedPage) -> "FeedResponse":
        return cls(
            recipes=[FeedRecipe.from_item(item) for item in page.items],
            algorithm_metadata=AlgorithmMetadata(
                weights=page.weights.to_dict(),
                time_context=page.time_context,
                user_profile=page.profile.to_dict(),
                session_seed=page.seed,
                offset=page.offset,
                limit=page.limit,
                algorithm_version=page.algorithm_version,
            ),
        )


class NormalizeRequest(BaseModel):
    name: str
    quantity: float | str | None = None
    unit: str | None = None


class NormalizeResponse(BaseModel):
    raw_name: str
    canonical_name: str | None
    category: str | None
    quantity: float | None
    unit: str
    unit_category: str
    confidence: float
    match_type: str
    unit_assumed: bool
    category_mismatch: bool

    @classmethod
    def from_result(cls, result: NormalizedIngredient) -> "NormalizeResponse":
        return cls(
            raw_name=result.raw_name,
            canonical_name=result.token.canonical_name if result.token else None,
            category=result.token.category.value if result.token else None,
            quantity=result.quantity,
            unit=result.unit,
            unit_category=result.unit_category.value,
            confidence=result.confidence,
            match_type=result.match_type,
            unit_assumed=result.unit_assumed,
            category_mismatch=result.category_mismatch,
        )


# =============================================================================
# Dependencies
# =============================================================================


@lru_cache
def get_engine() -> DiscoveryEngine:
    """Shared engine over the Supabase data source."""
    return DiscoveryEngine(SupabaseDataSource())


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/feed/{user_id}")
def get_feed(
    user_id: str,
    time_context: str | None = None,
    seed: int | None = None,
    offset: int = 0,
    limit: int | None = None,
    pantry_aware: bool = False,
    engine: DiscoveryEngine = Depends(get_engine),
) -> FeedResponse:
    """
    One page of the discovery feed.

    Same user, context, and seed give the same ordering.
    """
    page = engine.get_feed_page(
        user_id,
        time_context=time_context,
        session_seed=seed,
        offset=offset,
        limit=limit,
        pantry_aware=pantry_aware,
    )
    return FeedResponse.from_page(page)


@router.get("/recipes/{recipe_id}/pantry-match")
def get_pantry_match(
    recipe_id: str,
    user_id: str = Query(..., min_length=1),
    engine: DiscoveryEngine = Depends(get_engine),
) -> MatchResponse:
    """Pantry coverage of a single recipe."""
    return MatchResponse.from_result(engine.get_pantry_match(user_id, recipe_id))


@router.post("/normalize")
def normalize_ingredient(request: NormalizeRequest) -> NormalizeResponse:
    """Normalize one free-text ingredient."""
    result = get_normalizer().normalize(request.name, request.quantity, request.unit)
    return NormalizeResponse.from_result(result)

