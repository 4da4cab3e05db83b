"""
KitchAI Discovery - Feed orchestration.

One discovery request runs sequentially over a fetched snapshot:

    fetch -> (pantry-aware) match -> profile -> score -> weights -> rank

Nothing here is cached between requests; DiscoveryEngine only holds the
data source and the validated policies.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, TypeVar

from kitchai import ALGORITHM_VERSION
from kitchai.config import settings
from kitchai.db.adapter import DiscoveryDataSource, RecipeFilters
from kitchai.engine.normalizer import IngredientNormalizer, get_normalizer
from kitchai.engine.pantry_match import compute_match, compute_match_batch
from kitchai.engine.profile_builder import build_profile
from kitchai.engine.ranker import rank, session_seed as derive_seed
from kitchai.engine.scoring import ScoringPolicy, score_batch
from kitchai.engine.weights import WeightPolicy, infer_time_context, resolve_time_context, select_weight_profile
from kitchai.errors import BadRequestError, DataUnavailableError, DiscoveryError
from kitchai.models import FeedItem, FeedPage, MatchResult, RecipeCandidate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DiscoveryEngine:
    """
    Entry point for feed pages and pantry matches.

    Policies are built (and validated) on construction, so a bad weight
    table fails at startup rather than on the first request.
    """

    def __init__(
        self,
        data_source: DiscoveryDataSource,
        scoring_policy: ScoringPolicy | None = None,
        weight_policy: WeightPolicy | None = None,
        normalizer: IngredientNormalizer | None = None,
    ):
        self.data_source = data_source
        self.scoring_policy = scoring_policy or ScoringPolicy.from_settings()
        self.weight_policy = weight_policy or WeightPolicy.from_settings()
        self.normalizer = normalizer or get_normalizer()

    def _fetch(self, source: str, fetch: Callable[[], T]) -> T:
        try:
            return fetch()
        except DiscoveryError:
            raise
        except Exception as e:
            logger.error(f"Fetching {source} failed: {e}")
            raise DataUnavailableError(f"Failed to fetch {source}: {e}", source=source) from e

    @staticmethod
    def _require_id(value: str, name: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise BadRequestError(f"{name} is required")
        return value.strip()

    def _eligible_pool(self, candidates: list[RecipeCandidate]) -> list[RecipeCandidate]:
        # Upstream filters should already do this; the pool invariant is enforced here too
        pool = []
        for candidate in candidates:
            if candidate.is_ai_generated or not candidate.is_public:
                logger.warning(f"Data source returned ineligible recipe {candidate.id}, dropping")
                continue
            pool.append(candidate)
        return pool

    # =========================================================================
    # Public API
    # =========================================================================

    def get_feed_page(
        self,
        user_id: str,
        time_context: str | None = None,
        session_seed: int | None = None,
        offset: int = 0,
        limit: int | None = None,
        pantry_aware: bool = False,
        now: datetime | None = None,
    ) -> FeedPage:
        """
        Build one page of the discovery feed.

        Args:
            user_id: Requesting user
            time_context: morning / lunch / dinner / general (inferred from `now` if omitted)
            session_seed: Jitter seed; derived from the user id if omitted
            offset: Page offset
            limit: Page size (capped at settings.max_page_limit)
            pantry_aware: Annotate candidates with pantry matches and use them in scoring
            now: Reference time (defaults to current UTC time)

        Returns:
            FeedPage; empty items when no candidates are eligible

        Raises:
            BadRequestError: Missing user id or negative paging arguments
            DataUnavailableError: A fetch failed
        """
        user_id = self._require_id(user_id, "user_id")
        limit = settings.default_page_limit if limit is None else limit
        if offset < 0 or limit < 0:
            raise BadRequestError(f"offset and limit must be non-negative (got offset={offset}, limit={limit})")
        limit = min(limit, settings.max_page_limit)

        now = now or datetime.now(timezone.utc)
        context = resolve_time_context(time_context or infer_time_context(now.hour), self.weight_policy)
        seed = derive_seed(user_id) if session_seed is None else session_seed

        ds = self.data_source
        filters = RecipeFilters(max_age_days=settings.feed_window_days)
        candidates = self._eligible_pool(self._fetch("recipes", lambda: ds.fetch_eligible_recipes(filters)))
        interactions = self._fetch(
            "interactions", lambda: ds.fetch_interactions(user_id, settings.interaction_window_days)
        )
        followed = self._fetch("follows", lambda: ds.fetch_followed_creator_ids(user_id))
        following_count = self._fetch("follows", lambda: ds.fetch_following_count(user_id))

        matches: dict[str, MatchResult] | None = None
        if pantry_aware:
            pantry = self._fetch("pantry", lambda: ds.fetch_pantry(user_id))
            matches = compute_match_batch(candidates, pantry, self.normalizer)

        profile = build_profile(
            user_id, interactions, following_count, now=now, window_days=settings.interaction_window_days
        )
        weights = select_weight_profile(context, profile, self.weight_policy)

        breakdowns = score_batch(
            candidates,
            profile,
            now,
            followed_creator_ids=followed,
            matches=matches,
            policy=self.scoring_policy,
        )
        ranked = rank(breakdowns, weights, offset, limit, seed, policy=self.weight_policy)

        # First occurrence wins, matching rank()
        by_id: dict[str, RecipeCandidate] = {}
        for candidate in candidates:
            by_id.setdefault(candidate.id, candidate)
        items = [
            FeedItem(
                recipe=by_id[r.recipe_id],
                breakdown=r.breakdown,
                position=r.position,
                match=matches.get(r.recipe_id) if matches is not None else None,
            )
            for r in ranked
        ]

        logger.info(
            f"Feed for {user_id}: {len(items)}/{len(candidates)} recipes "
            f"(context={context}, offset={offset}, pantry_aware={pantry_aware})"
        )

        return FeedPage(
            items=items,
            weights=weights,
            time_context=context,
            profile=profile,
            seed=seed,
            offset=offset,
            limit=limit,
            algorithm_version=ALGORITHM_VERSION,
        )

    def get_pantry_match(self, user_id: str, recipe_id: str) -> MatchResult:
        """
        Pantry coverage of one recipe for the detail view.

        Raises:
            RecipeNotFoundError: Unknown recipe id
            DataUnavailableError: A fetch failed
        """
        user_id = self._require_id(user_id, "user_id")
        recipe_id = self._require_id(recipe_id, "recipe_id")

        recipe = self._fetch("recipe", lambda: self.data_source.fetch_recipe(recipe_id))
        pantry = self._fetch("pantry", lambda: self.data_source.fetch_pantry(user_id))

        result = compute_match(recipe.ingredients, pantry, self.normalizer)
        logger.info(f"Pantry match {user_id}/{recipe_id}: {result.match_percentage}%")
        return result
