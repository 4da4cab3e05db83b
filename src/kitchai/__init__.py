"""
KitchAI Discovery - recipe feed ranking and pantry matching.

Engine:
- Normalizer: canonical ingredient names and base units
- Pantry match: recipe coverage by the user's inventory
- Profile builder: behavior signals from interaction history
- Scorer / Ranker: lane-weighted, seeded feed selection
"""

__version__ = "4.0.0"

# Reported in feed metadata; bump when scoring or weighting changes
ALGORITHM_VERSION = "enhanced_v4_human_only"
