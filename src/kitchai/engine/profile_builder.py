"""
KitchAI Discovery - Behavior Profile Builder.

Aggregates a user's recent interactions into a compact profile:
- Like / save rates (fraction of interactions in the window)
- Comment count and comments-per-week
- Following count
- Engagement score, bounded to [0, 10]

A user with no interactions gets a complete profile with priors; the
ranking pipeline has no separate "no profile" branch.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable

from kitchai.config import settings
from kitchai.models import BehaviorProfile, InteractionEvent, InteractionType

logger = logging.getLogger(__name__)

# Priors for users with no history, so new users are not scored as if
# they dislike everything
PRIOR_LIKE_RATE = 0.1
PRIOR_SAVE_RATE = 0.05

MAX_ENGAGEMENT_SCORE = 10.0
SAVE_WEIGHT = 3.0


def _in_window(event: InteractionEvent, now: datetime, cutoff: datetime) -> bool:
    # Future timestamps (clock skew) count as "now"
    return min(event.created_at, now) >= cutoff


def build_profile(
    user_id: str,
    interactions: Iterable[InteractionEvent],
    following_count: int = 0,
    now: datetime | None = None,
    window_days: int | None = None,
) -> BehaviorProfile:
    """
    Build a behavior profile from an interaction snapshot.

    Args:
        user_id: The user's UUID
        interactions: Interaction events (any order, may extend past the window)
        following_count: How many creators the user follows
        now: Reference time (defaults to current UTC time)
        window_days: Trailing window (defaults to settings.interaction_window_days)

    Returns:
        BehaviorProfile, fully populated even for an empty history
    """
    now = now or datetime.now(timezone.utc)
    window_days = window_days or settings.interaction_window_days
    cutoff = now - timedelta(days=window_days)

    counts = {t: 0 for t in InteractionType}
    total = 0
    for event in interactions:
        if not _in_window(event, now, cutoff):
            continue
        counts[event.interaction_type] += 1
        total += 1

    profile = BehaviorProfile(user_id=user_id, following_count=max(0, following_count))
    if total == 0:
        profile.like_rate = PRIOR_LIKE_RATE
        profile.save_rate = PRIOR_SAVE_RATE
    else:
        profile.like_rate = counts[InteractionType.LIKE] / total
        profile.save_rate = counts[InteractionType.SAVE] / total

    profile.comment_frequency = counts[InteractionType.COMMENT]
    profile.interaction_count = total

    comments_per_week = profile.comment_frequency / (window_days / 7)
    profile.engagement_score = max(
        0.0,
        min(MAX_ENGAGEMENT_SCORE, profile.like_rate + profile.save_rate * SAVE_WEIGHT + comments_per_week),
    )

    logger.debug(
        f"Profile for {user_id}: {total} interactions, engagement={profile.engagement_score:.2f}"
    )
    return profile


def format_profile_summary(profile: BehaviorProfile) -> str:
    """
    Format a profile as a short text block for diagnostics.

    Args:
        profile: The computed behavior profile

    Returns:
        Multi-line summary string
    """
    lines = [f"## BEHAVIOR PROFILE ({profile.user_id})"]

    if not profile.has_history:
        lines.append("No interactions in window (using priors)")

    lines.append(f"Like rate: {profile.like_rate:.0%}")
    lines.append(f"Save rate: {profile.save_rate:.0%}")
    lines.append(f"Comments: {profile.comment_frequency}")
    lines.append(f"Following: {profile.following_count}")
    lines.append(f"Engagement: {profile.engagement_score:.2f} / {MAX_ENGAGEMENT_SCORE:.0f}")

    return "\n".join(lines)
