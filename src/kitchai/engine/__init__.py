"""
KitchAI Discovery - Engine Package.

Pipeline stages, leaf first:
- normalizer: canonical ingredient tokens and base-unit quantities
- pantry_match: recipe coverage by a pantry snapshot
- profile_builder: behavior profile from interactions
- scoring: per-candidate sub-scores, composite, lane
- weights / ranker: lane weights and seeded page selection
- feed: DiscoveryEngine, the request orchestration
"""

from kitchai.engine.feed import DiscoveryEngine
from kitchai.engine.normalizer import check_merge, normalize
from kitchai.engine.pantry_match import compute_match, compute_match_batch, filter_by_match
from kitchai.engine.profile_builder import build_profile
from kitchai.engine.ranker import rank, session_seed
from kitchai.engine.scoring import ScoringPolicy, score
from kitchai.engine.weights import WeightPolicy, select_weight_profile

__all__ = [
    "DiscoveryEngine",
    "ScoringPolicy",
    "WeightPolicy",
    "build_profile",
    "check_merge",
    "compute_match",
    "compute_match_batch",
    "filter_by_match",
    "normalize",
    "rank",
    "score",
    "select_weight_profile",
    "session_seed",
]
