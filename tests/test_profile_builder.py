"""
Tests for behavior profile building.
"""

from datetime import timedelta

import pytest

from kitchai.engine.profile_builder import (
    PRIOR_LIKE_RATE,
    PRIOR_SAVE_RATE,
    build_profile,
    format_profile_summary,
)
from kitchai.models import BehaviorProfile, InteractionEvent, InteractionType


def _events(now, kind: InteractionType, count: int, days_ago: int = 1):
    return [InteractionEvent(kind, now - timedelta(days=days_ago)) for _ in range(count)]


class TestBehaviorProfile:
    """Tests for BehaviorProfile dataclass."""

    def test_default_values(self):
        """BehaviorProfile should have prior defaults."""
        profile = BehaviorProfile(user_id="u")
        assert profile.like_rate == 0.1
        assert profile.save_rate == 0.05
        assert profile.engagement_score == 0.0
        assert profile.has_history is False


class TestBuildProfile:
    """Tests for build_profile()."""

    def test_empty_history_gets_priors(self, now):
        """New users get a complete profile, not an error."""
        profile = build_profile("new-user", [], following_count=0, now=now)
        assert profile.like_rate == PRIOR_LIKE_RATE
        assert profile.save_rate == PRIOR_SAVE_RATE
        assert profile.comment_frequency == 0
        assert profile.interaction_count == 0
        assert profile.engagement_score == pytest.approx(0.25)

    def test_rates_are_fractions_of_interactions(self, now, sample_interactions):
        profile = build_profile("u1", sample_interactions, following_count=3, now=now)
        # 4 in window: 2 likes, 1 save, 1 comment; the 120-day-old like is dropped
        assert profile.interaction_count == 4
        assert profile.like_rate == 0.5
        assert profile.save_rate == 0.25
        assert profile.comment_frequency == 1
        assert profile.following_count == 3
        assert profile.engagement_score == pytest.approx(0.5 + 0.75 + 1 / (90 / 7))

    def test_window_is_configurable(self, now, sample_interactions):
        profile = build_profile("u1", sample_interactions, now=now, window_days=4)
        assert profile.interaction_count == 2

    def test_future_events_count_as_now(self, now):
        events = _events(now, InteractionType.LIKE, 1, days_ago=-2)
        assert build_profile("u", events, now=now).interaction_count == 1

    def test_heavy_commenter_crosses_threshold(self, now):
        events = _events(now, InteractionType.COMMENT, 80)
        profile = build_profile("u", events, now=now)
        assert profile.engagement_score > 5

    def test_engagement_is_capped(self, now):
        events = _events(now, InteractionType.COMMENT, 500)
        assert build_profile("u", events, now=now).engagement_score == 10.0

    def test_views_dilute_rates(self, now):
        events = _events(now, InteractionType.LIKE, 1) + _events(now, InteractionType.VIEW, 3)
        profile = build_profile("u", events, now=now)
        assert profile.like_rate == 0.25
        assert profile.save_rate == 0.0


class TestFormatProfileSummary:
    """Tests for profile summary formatting."""

    def test_new_user_mentions_priors(self, now):
        result = format_profile_summary(build_profile("u2", [], now=now))
        assert result.startswith("## BEHAVIOR PROFILE (u2)")
        assert "using priors" in result

    def test_includes_rates(self, now, sample_interactions):
        result = format_profile_summary(build_profile("u1", sample_interactions, 2, now=now))
        assert "Like rate: 50%" in result
        assert "Following: 2" in result
