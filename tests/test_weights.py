"""
Tests for the weight policy and time-context selection.
"""

import pytest

from kitchai.engine.weights import (
    HIGH_ENGAGEMENT_WEIGHTS,
    NO_SIGNAL_WEIGHTS,
    TIME_CONTEXT_WEIGHTS,
    WeightPolicy,
    infer_time_context,
    select_weight_profile,
)
from kitchai.errors import ConfigurationError
from kitchai.models import BehaviorProfile, Lane, WeightProfile


def _profile(engagement: float = 1.0, interactions: int = 10) -> BehaviorProfile:
    return BehaviorProfile(user_id="u", engagement_score=engagement, interaction_count=interactions)


class TestSelectWeightProfile:
    """Decision table lookups."""

    @pytest.mark.parametrize(
        "context, expected",
        [
            ("morning", (0.8, 0.1, 0.1)),
            ("lunch", (0.6, 0.3, 0.1)),
            ("dinner", (0.7, 0.2, 0.1)),
            ("general", (0.65, 0.25, 0.1)),
        ],
    )
    def test_time_contexts(self, context, expected):
        weights = select_weight_profile(context, _profile())
        assert (weights.personalized, weights.trending, weights.discovery) == expected

    def test_high_engagement_overrides_any_context(self):
        for context in TIME_CONTEXT_WEIGHTS:
            assert select_weight_profile(context, _profile(engagement=6.0)) == HIGH_ENGAGEMENT_WEIGHTS

    def test_threshold_is_exclusive(self):
        assert select_weight_profile("dinner", _profile(engagement=5.0)) == TIME_CONTEXT_WEIGHTS["dinner"]

    def test_no_history_is_discovery_dominant(self):
        weights = select_weight_profile("morning", _profile(engagement=0.25, interactions=0))
        assert weights == NO_SIGNAL_WEIGHTS
        assert weights.discovery > weights.personalized

    def test_unknown_context_falls_back_to_general(self, caplog):
        weights = select_weight_profile("brunch", _profile())
        assert weights == TIME_CONTEXT_WEIGHTS["general"]
        assert "brunch" in caplog.text

    def test_context_is_case_insensitive(self):
        assert select_weight_profile("Dinner", _profile()) == TIME_CONTEXT_WEIGHTS["dinner"]

    def test_missing_context_is_general(self):
        assert select_weight_profile(None, _profile()) == TIME_CONTEXT_WEIGHTS["general"]


class TestInferTimeContext:

    @pytest.mark.parametrize(
        "hour, expected",
        [(4, "general"), (5, "morning"), (10, "morning"), (11, "lunch"), (14, "lunch"),
         (15, "general"), (17, "dinner"), (21, "dinner"), (22, "general")],
    )
    def test_hours(self, hour, expected):
        assert infer_time_context(hour) == expected


class TestWeightPolicy:
    """Policy validation."""

    def test_defaults_are_valid(self):
        policy = WeightPolicy()
        assert set(policy.time_contexts) == {"morning", "lunch", "dinner", "general"}

    def test_sum_above_one_rejected(self):
        with pytest.raises(ConfigurationError):
            WeightPolicy(time_contexts={"general": WeightProfile(0.8, 0.3, 0.1)})

    def test_negative_weight_rejected(self):
        with pytest.raises(ConfigurationError):
            WeightPolicy(high_engagement=WeightProfile(0.5, -0.1, 0.2))

    def test_general_required(self):
        with pytest.raises(ConfigurationError):
            WeightPolicy(time_contexts={"dinner": WeightProfile(0.7, 0.2, 0.1)})

    def test_following_weight_bounds(self):
        with pytest.raises(ConfigurationError):
            WeightPolicy(following_weight=1.5)

    def test_lane_weights(self):
        policy = WeightPolicy()
        weights = WeightProfile(0.7, 0.2, 0.1)
        assert policy.lane_weight(Lane.PERSONALIZED, weights) == 0.7
        assert policy.lane_weight(Lane.TRENDING, weights) == 0.2
        assert policy.lane_weight(Lane.DISCOVERY, weights) == 0.1
        assert policy.lane_weight(Lane.FOLLOWING, weights) == 0.2
