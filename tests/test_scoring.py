"""
Tests for candidate scoring and lane classification.
"""

import pytest

from kitchai.engine.profile_builder import build_profile
from kitchai.engine.scoring import (
    ScoringPolicy,
    engagement_velocity,
    freshness_score,
    personalization_score,
    quality_score,
    score,
    score_batch,
)
from kitchai.errors import ConfigurationError
from kitchai.models import Lane, MatchResult

from conftest import make_recipe


@pytest.fixture
def profile(now):
    return build_profile("u1", [], now=now)


@pytest.fixture
def policy():
    return ScoringPolicy(
        composite_weights={"engagement": 0.4, "personalization": 0.35, "freshness": 0.15, "quality": 0.10}
    )


class TestSubScores:
    """Each sub-score in isolation."""

    def test_velocity_first_day(self):
        recipe = make_recipe("r", likes=10, saves=2, comments=1)
        assert engagement_velocity(recipe, 12) == pytest.approx(210 / 12)

    def test_velocity_first_hour_not_inflated(self):
        recipe = make_recipe("r", likes=1)
        assert engagement_velocity(recipe, 0.1) == 10.0

    def test_velocity_first_week(self):
        recipe = make_recipe("r", likes=10)
        assert engagement_velocity(recipe, 48) == pytest.approx(25.0)

    def test_velocity_older(self):
        recipe = make_recipe("r", likes=10)
        assert engagement_velocity(recipe, 336) == pytest.approx(5.0)

    def test_recent_beats_stale_totals(self):
        fresh = make_recipe("fresh", likes=20)
        stale = make_recipe("stale", likes=200)
        assert engagement_velocity(fresh, 6) > engagement_velocity(stale, 2000)

    @pytest.mark.parametrize(
        "hours, expected",
        [(0, 100.0), (24, 100.0), (96, 71.2), (168, 42.4), (1000, 33.44), (5000, 30.0)],
    )
    def test_freshness(self, hours, expected):
        assert freshness_score(hours) == pytest.approx(expected)

    def test_freshness_never_below_floor(self):
        assert min(freshness_score(h) for h in range(0, 20000, 37)) >= 30.0

    def test_personalization_points(self):
        rich = make_recipe("r", ingredients=["a", "b", "c", "d"], video_url="https://v.mp4")
        assert personalization_score(rich, following_creator=True) == 100.0
        plain = make_recipe("r", ingredients=["a"])
        assert personalization_score(plain, following_creator=False) == 10.0

    def test_personalization_blank_video_not_playable(self):
        recipe = make_recipe("r", video_url="   ")
        assert personalization_score(recipe, False) == 10.0

    def test_personalization_pantry_match(self):
        recipe = make_recipe("r")
        assert personalization_score(recipe, False, MatchResult(50)) == 30.0

    def test_quality_tiers(self):
        best = make_recipe(
            "r",
            description="x" * 120,
            video_url="https://v.mp4",
            ingredients=list("abcdef"),
        )
        assert quality_score(best) == 100.0
        assert quality_score(make_recipe("r")) == 25.0
        assert quality_score(make_recipe("r", description="short", ingredients=["a", "b"])) == 40.0


class TestScore:
    """Tests for score() and lanes."""

    def test_composite_uses_policy_weights(self, now, profile, policy):
        recipe = make_recipe("r", hours_old=12, likes=10, saves=2, comments=1)
        result = score(recipe, profile, now, policy=policy)
        expected = (
            result.engagement_velocity * 0.4
            + result.personalization_score * 0.35
            + result.freshness_score * 0.15
            + result.quality_score * 0.10
        )
        assert result.composite_score == pytest.approx(expected)
        assert result.hours_since_creation == pytest.approx(12)

    def test_custom_weights_change_composite(self, now, profile):
        recipe = make_recipe("r", hours_old=12)
        only_quality = ScoringPolicy({"engagement": 0, "personalization": 0, "freshness": 0, "quality": 1})
        assert score(recipe, profile, now, policy=only_quality).composite_score == quality_score(recipe)

    def test_personalized_lane(self, now, profile, policy):
        recipe = make_recipe("r", ingredients=list("abcd"), video_url="https://v.mp4")
        assert score(recipe, profile, now, following_creator=True, policy=policy).lane == Lane.PERSONALIZED

    def test_trending_lane(self, now, profile, policy):
        recipe = make_recipe("r", hours_old=10, likes=60)
        assert score(recipe, profile, now, policy=policy).lane == Lane.TRENDING

    def test_trending_requires_recent(self, now, profile, policy):
        recipe = make_recipe("r", hours_old=100, likes=5000)
        assert score(recipe, profile, now, policy=policy).lane == Lane.DISCOVERY

    def test_following_lane(self, now, profile, policy):
        recipe = make_recipe("r", hours_old=100)
        result = score(recipe, profile, now, following_creator=True, policy=policy)
        assert result.personalization_score == 60.0
        assert result.lane == Lane.FOLLOWING

    def test_future_timestamp_treated_as_new(self, now, profile, policy):
        recipe = make_recipe("r", hours_old=-5)
        result = score(recipe, profile, now, policy=policy)
        assert result.hours_since_creation == 0
        assert result.freshness_score == 100.0

    def test_profile_does_not_change_breakdown(self, now, profile, sample_interactions, policy):
        """Behavior shifts lane weights, not per-recipe scores."""
        active = build_profile("u1", sample_interactions, following_count=3, now=now)
        recipe = make_recipe("r", hours_old=30, likes=4, ingredients=list("abcd"))
        assert score(recipe, active, now, policy=policy) == score(recipe, profile, now, policy=policy)

    def test_ai_generated_rejected(self, now, profile, ai_recipe, policy):
        with pytest.raises(ValueError):
            score(ai_recipe, profile, now, policy=policy)

    def test_batch_skips_ai_and_keeps_order(self, now, profile, sample_recipes, ai_recipe, policy):
        results = score_batch(
            [ai_recipe] + sample_recipes,
            profile,
            now,
            followed_creator_ids={"creator-2"},
            policy=policy,
            max_workers=3,
        )
        assert [r.recipe_id for r in results] == [r.id for r in sample_recipes]
        assert [r.following_creator for r in results] == [r.creator_id == "creator-2" for r in sample_recipes]


class TestScoringPolicy:
    """Policy validation."""

    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            ScoringPolicy({"engagement": 0.4, "personalization": 0.35, "freshness": 0.15})

    def test_negative_weight(self):
        with pytest.raises(ConfigurationError):
            ScoringPolicy({"engagement": -0.4, "personalization": 0.35, "freshness": 0.15, "quality": 0.1})

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            ScoringPolicy({"engagement": 0.4, "personalization": 0.35, "freshness": 0.15, "quality": 0.1, "x": 1})

    def test_from_settings(self):
        policy = ScoringPolicy.from_settings()
        assert policy.composite_weights["engagement"] == 0.4
        assert policy.personalized_threshold == 60.0

    def test_weights_are_read_only(self, policy):
        with pytest.raises(TypeError):
            policy.composite_weights["quality"] = 5  # type: ignore[index]
