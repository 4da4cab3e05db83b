"""
KitchAI Discovery - Candidate Scorer.

Each candidate gets four sub-scores, blended into a composite:
- engagement_velocity: decaying interaction rate, three age bands
- personalization_score: followed creator, playable video, ingredient richness
- freshness_score: 100 for the first day, never below 30
- quality_score: description, media, human-authored, ingredient tiers

Coefficients and lane thresholds live in ScoringPolicy so tuning them is a
settings change, not a code change.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Mapping

from kitchai.config import settings
from kitchai.engine.pantry_match import resolve_workers
from kitchai.errors import ConfigurationError
from kitchai.models import BehaviorProfile, Lane, MatchResult, RecipeCandidate, ScoreBreakdown

logger = logging.getLogger(__name__)

COMPOSITE_KEYS = ("engagement", "personalization", "freshness", "quality")

# Velocity bands: (max age hours, (like, save, comment) weights, hours per unit of age)
VELOCITY_BANDS: tuple[tuple[float, tuple[float, float, float], float], ...] = (
    (24.0, (10.0, 30.0, 50.0), 1.0),
    (168.0, (5.0, 15.0, 25.0), 24.0),
    (float("inf"), (1.0, 3.0, 5.0), 168.0),
)

FRESHNESS_FLOOR = 30.0

# Personalization points
FOLLOWING_BONUS = 50.0
VIDEO_BONUS = 30.0
RICH_INGREDIENTS_BONUS = 20.0
BASIC_INGREDIENTS_BONUS = 10.0
PANTRY_MATCH_WEIGHT = 40.0


@dataclass(frozen=True)
class ScoringPolicy:
    """Composite coefficients and lane thresholds."""

    composite_weights: Mapping[str, float]
    personalized_threshold: float = 60.0
    trending_velocity_threshold: float = 50.0
    trending_max_age_hours: float = 48.0

    def __post_init__(self):
        missing = [k for k in COMPOSITE_KEYS if k not in self.composite_weights]
        if missing:
            raise ConfigurationError(f"composite_weights missing keys: {', '.join(missing)}")
        unknown = set(self.composite_weights) - set(COMPOSITE_KEYS)
        if unknown:
            raise ConfigurationError(f"composite_weights has unknown keys: {', '.join(sorted(unknown))}")
        for key, value in self.composite_weights.items():
            if value is None or value < 0:
                raise ConfigurationError(f"composite weight '{key}' must be non-negative, got {value}")
        for name in ("personalized_threshold", "trending_velocity_threshold", "trending_max_age_hours"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative")
        object.__setattr__(self, "composite_weights", MappingProxyType(dict(self.composite_weights)))

    @classmethod
    def from_settings(cls) -> "ScoringPolicy":
        return cls(
            composite_weights=settings.composite_weights,
            personalized_threshold=settings.personalized_lane_threshold,
            trending_velocity_threshold=settings.trending_velocity_threshold,
            trending_max_age_hours=settings.trending_max_age_hours,
        )


# =============================================================================
# Sub-scores
# =============================================================================


def hours_since(created_at: datetime, now: datetime) -> float:
    """Age in hours, clamped at zero for timestamps in the future."""
    return max(0.0, (now - created_at).total_seconds() / 3600)


def engagement_velocity(candidate: RecipeCandidate, hours: float) -> float:
    """
    Interaction rate that decays with age.

    Newer bands weight each interaction more and divide by a smaller age
    unit, so recent activity outranks stale totals.
    """
    for max_hours, (w_like, w_save, w_comment), unit in VELOCITY_BANDS:
        if hours <= max_hours:
            raw = candidate.likes * w_like + candidate.saves * w_save + candidate.comments * w_comment
            return raw / max(hours / unit, 1.0)
    return 0.0  # unreachable, last band is unbounded


def personalization_score(
    candidate: RecipeCandidate,
    following_creator: bool,
    match: MatchResult | None = None,
) -> float:
    score = 0.0
    if following_creator:
        score += FOLLOWING_BONUS
    if candidate.has_playable_media:
        score += VIDEO_BONUS
    score += RICH_INGREDIENTS_BONUS if len(candidate.ingredients) >= 4 else BASIC_INGREDIENTS_BONUS
    if match is not None:
        score += match.match_percentage / 100 * PANTRY_MATCH_WEIGHT
    return score


def freshness_score(hours: float) -> float:
    if hours <= 24:
        return 100.0
    if hours <= 168:
        return max(FRESHNESS_FLOOR, 100.0 - (hours - 24) * 0.4)
    return max(FRESHNESS_FLOOR, 100.0 - (hours - 168) * 0.08)


def quality_score(candidate: RecipeCandidate) -> float:
    score = 0.0

    description = (candidate.description or "").strip()
    if len(description) > 100:
        score += 25
    elif len(description) > 50:
        score += 20
    elif description:
        score += 10

    if candidate.has_playable_media:
        score += 35

    # Human-authored bonus; AI recipes never reach the scorer
    score += 25

    n = len(candidate.ingredients)
    if n >= 6:
        score += 15
    elif n >= 4:
        score += 10
    elif n >= 2:
        score += 5

    return float(score)


def classify_lane(
    personalization: float,
    velocity: float,
    hours: float,
    following_creator: bool,
    policy: ScoringPolicy,
) -> Lane:
    if personalization > policy.personalized_threshold:
        return Lane.PERSONALIZED
    if velocity > policy.trending_velocity_threshold and hours <= policy.trending_max_age_hours:
        return Lane.TRENDING
    if following_creator:
        return Lane.FOLLOWING
    return Lane.DISCOVERY


# =============================================================================
# Public API
# =============================================================================


def score(
    candidate: RecipeCandidate,
    profile: BehaviorProfile,
    now: datetime,
    *,
    following_creator: bool = False,
    match: MatchResult | None = None,
    policy: ScoringPolicy | None = None,
) -> ScoreBreakdown:
    """
    Score one candidate.

    Args:
        candidate: Recipe to score (must be human-authored)
        profile: Requesting user's behavior profile. Only logged: the
            sub-scores depend only on per-recipe signals (follow, pantry
            match); the profile acts through select_weight_profile()
        now: Reference time for age-based scores
        following_creator: Whether the user follows the recipe's creator
        match: Pantry match, only for pantry-aware requests
        policy: Scoring policy (defaults to settings)

    Returns:
        ScoreBreakdown with sub-scores, composite, and lane

    Raises:
        ValueError: If the candidate is AI-generated
    """
    if candidate.is_ai_generated:
        raise ValueError(f"AI-generated recipe {candidate.id} cannot be scored for the community feed")

    policy = policy or ScoringPolicy.from_settings()
    hours = hours_since(candidate.created_at, now)

    velocity = engagement_velocity(candidate, hours)
    personalization = personalization_score(candidate, following_creator, match)
    freshness = freshness_score(hours)
    quality = quality_score(candidate)

    w = policy.composite_weights
    composite = (
        velocity * w["engagement"]
        + personalization * w["personalization"]
        + freshness * w["freshness"]
        + quality * w["quality"]
    )

    lane = classify_lane(personalization, velocity, hours, following_creator, policy)
    logger.debug(
        f"Scored {candidate.id} for {profile.user_id}: composite={composite:.2f} lane={lane.value}"
    )

    return ScoreBreakdown(
        recipe_id=candidate.id,
        engagement_velocity=velocity,
        personalization_score=personalization,
        freshness_score=freshness,
        quality_score=quality,
        composite_score=composite,
        lane=lane,
        hours_since_creation=hours,
        following_creator=following_creator,
    )


def score_batch(
    candidates: Iterable[RecipeCandidate],
    profile: BehaviorProfile,
    now: datetime,
    *,
    followed_creator_ids: frozenset[str] | set[str] = frozenset(),
    matches: Mapping[str, MatchResult] | None = None,
    policy: ScoringPolicy | None = None,
    max_workers: int | None = None,
) -> list[ScoreBreakdown]:
    """
    Score many candidates in parallel, preserving input order.

    AI-generated candidates are skipped with a warning rather than failing
    the batch.
    """
    policy = policy or ScoringPolicy.from_settings()
    pool = []
    for candidate in candidates:
        if candidate.is_ai_generated:
            logger.warning(f"Skipping AI-generated recipe {candidate.id} in scoring pool")
            continue
        pool.append(candidate)
    if not pool:
        return []

    def _score(candidate: RecipeCandidate) -> ScoreBreakdown:
        return score(
            candidate,
            profile,
            now,
            following_creator=candidate.creator_id in followed_creator_ids,
            match=matches.get(candidate.id) if matches is not None else None,
            policy=policy,
        )

    workers = min(resolve_workers(max_workers), len(pool))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(_score, pool))
