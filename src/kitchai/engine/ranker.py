"""
KitchAI Discovery - Weighted Selector / Ranker.

Sort key per candidate:

    composite_score * lane_weight * scale + jitter

jitter is uniform over [0, jitter_max) from random.Random(seed), drawn in
recipe-id order so the same seed and snapshot always produce the same page
regardless of how the snapshot was ordered.
"""

import hashlib
import logging
import random
from dataclasses import dataclass
from typing import Iterable

from kitchai.config import settings
from kitchai.engine.weights import WeightPolicy
from kitchai.errors import BadRequestError
from kitchai.models import ScoreBreakdown, WeightProfile

logger = logging.getLogger(__name__)


@dataclass
class RankedCandidate:
    """A breakdown with its final sort key and page position."""

    breakdown: ScoreBreakdown
    lane_weight: float
    jitter: float
    sort_key: float
    position: int = 0

    @property
    def recipe_id(self) -> str:
        return self.breakdown.recipe_id


def session_seed(user_id: str, session_id: str | None = None) -> int:
    """Stable 64-bit seed for a (user, session) pair."""
    digest = hashlib.sha256(f"{user_id}:{session_id or ''}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def rank(
    breakdowns: Iterable[ScoreBreakdown],
    weights: WeightProfile,
    offset: int = 0,
    limit: int = 20,
    seed: int = 0,
    *,
    policy: WeightPolicy | None = None,
    jitter_max: float | None = None,
    scale: float | None = None,
) -> list[RankedCandidate]:
    """
    Blend, jitter, sort, and slice one page.

    Args:
        breakdowns: Scored candidates (duplicates by id are dropped, first kept)
        weights: Lane weights for this request
        offset: Page offset (>= 0)
        limit: Page size (>= 0)
        seed: Seed for the jitter generator

    Returns:
        At most `limit` candidates; fewer at the end of the pool, never padded

    Raises:
        BadRequestError: If offset or limit is negative
    """
    if offset < 0 or limit < 0:
        raise BadRequestError(f"offset and limit must be non-negative (got offset={offset}, limit={limit})")

    policy = policy or WeightPolicy.from_settings()
    jitter_max = settings.jitter_max if jitter_max is None else jitter_max
    scale = settings.score_scale if scale is None else scale

    unique: dict[str, ScoreBreakdown] = {}
    for breakdown in breakdowns:
        if breakdown.recipe_id in unique:
            logger.debug(f"Dropping duplicate candidate {breakdown.recipe_id}")
            continue
        unique[breakdown.recipe_id] = breakdown

    rng = random.Random(seed)
    ranked: list[RankedCandidate] = []
    for recipe_id in sorted(unique):
        breakdown = unique[recipe_id]
        lane_weight = policy.lane_weight(breakdown.lane, weights)
        jitter = rng.uniform(0, jitter_max)
        ranked.append(RankedCandidate(
            breakdown=breakdown,
            lane_weight=lane_weight,
            jitter=jitter,
            sort_key=breakdown.composite_score * lane_weight * scale + jitter,
        ))

    ranked.sort(key=lambda r: (-r.sort_key, r.recipe_id))

    page = ranked[offset:offset + limit]
    for i, item in enumerate(page):
        item.position = offset + i
    return page
