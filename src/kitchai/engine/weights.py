"""
KitchAI Discovery - Weight Policy.

Lane weights are a small decision table keyed by time-of-day context,
with two behavior overrides:
- no interaction history -> discovery-dominant weights
- engagement_score above the threshold -> more trending/discovery

The whole table is validated when the policy is built; an invalid table
is a ConfigurationError, never a silent fallback.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

from kitchai.config import settings
from kitchai.errors import ConfigurationError
from kitchai.models import BehaviorProfile, Lane, WeightProfile

logger = logging.getLogger(__name__)

TimeContext = Literal["morning", "lunch", "dinner", "general"]

DEFAULT_TIME_CONTEXT = "general"

# Weight profiles by time of day: (personalized, trending, discovery)
TIME_CONTEXT_WEIGHTS: Mapping[str, WeightProfile] = MappingProxyType({
    "morning": WeightProfile(0.8, 0.1, 0.1),  # Breakfast routines
    "lunch": WeightProfile(0.6, 0.3, 0.1),
    "dinner": WeightProfile(0.7, 0.2, 0.1),
    "general": WeightProfile(0.65, 0.25, 0.1),
})

# Heavy users see less of their own bubble
HIGH_ENGAGEMENT_WEIGHTS = WeightProfile(0.5, 0.3, 0.2)

# Nothing to personalize on yet
NO_SIGNAL_WEIGHTS = WeightProfile(0.3, 0.3, 0.4)

# Hour ranges (inclusive) per context; anything else is "general"
TIME_CONTEXT_HOURS: tuple[tuple[str, int, int], ...] = (
    ("morning", 5, 10),
    ("lunch", 11, 14),
    ("dinner", 17, 21),
)


def validate_weight_profile(name: str, weights: WeightProfile) -> None:
    """Raise ConfigurationError unless every weight is >= 0 and the sum is <= 1."""
    values = (weights.personalized, weights.trending, weights.discovery)
    if any(v is None or v < 0 for v in values):
        raise ConfigurationError(f"Weight profile '{name}' has a negative weight: {weights}")
    if sum(values) > 1.0 + 1e-9:
        raise ConfigurationError(f"Weight profile '{name}' sums to more than 1: {weights}")


@dataclass(frozen=True)
class WeightPolicy:
    """Typed weight table plus its behavior overrides."""

    time_contexts: Mapping[str, WeightProfile] = field(default_factory=lambda: TIME_CONTEXT_WEIGHTS)
    high_engagement: WeightProfile = HIGH_ENGAGEMENT_WEIGHTS
    no_signal: WeightProfile = NO_SIGNAL_WEIGHTS
    high_engagement_threshold: float = 5.0
    following_weight: float = 0.2

    def __post_init__(self):
        if DEFAULT_TIME_CONTEXT not in self.time_contexts:
            raise ConfigurationError(f"Weight table has no '{DEFAULT_TIME_CONTEXT}' profile")
        for name, weights in self.time_contexts.items():
            validate_weight_profile(name, weights)
        validate_weight_profile("high_engagement", self.high_engagement)
        validate_weight_profile("no_signal", self.no_signal)
        if self.following_weight is None or not 0 <= self.following_weight <= 1:
            raise ConfigurationError(f"following_weight must be in [0, 1], got {self.following_weight}")
        if self.high_engagement_threshold is None or self.high_engagement_threshold < 0:
            raise ConfigurationError("high_engagement_threshold must be non-negative")
        object.__setattr__(self, "time_contexts", MappingProxyType(dict(self.time_contexts)))

    @classmethod
    def from_settings(cls) -> "WeightPolicy":
        return cls(
            high_engagement_threshold=settings.high_engagement_threshold,
            following_weight=settings.following_lane_weight,
        )

    def lane_weight(self, lane: Lane, weights: WeightProfile) -> float:
        """Weight applied to a candidate in the given lane."""
        if lane == Lane.FOLLOWING:
            return self.following_weight
        return getattr(weights, lane.value)


def resolve_time_context(time_context: str | None, policy: WeightPolicy) -> str:
    """Known context name, or 'general' (with a warning) for anything else."""
    if not time_context:
        return DEFAULT_TIME_CONTEXT
    context = time_context.strip().lower()
    if context not in policy.time_contexts:
        logger.warning(f"Unknown time context '{time_context}', using '{DEFAULT_TIME_CONTEXT}'")
        return DEFAULT_TIME_CONTEXT
    return context


def select_weight_profile(
    time_context: str | None,
    profile: BehaviorProfile,
    policy: WeightPolicy | None = None,
) -> WeightProfile:
    """
    Pick lane weights for a request.

    Precedence: no history, then high engagement, then time of day.
    """
    policy = policy or WeightPolicy.from_settings()
    context = resolve_time_context(time_context, policy)

    if not profile.has_history:
        return policy.no_signal
    if profile.engagement_score > policy.high_engagement_threshold:
        return policy.high_engagement
    return policy.time_contexts[context]


def infer_time_context(hour: int) -> TimeContext:
    """Map an hour of day (0-23) to a time context."""
    for name, start, end in TIME_CONTEXT_HOURS:
        if start <= hour <= end:
            return name  # type: ignore[return-value]
    return "general"
