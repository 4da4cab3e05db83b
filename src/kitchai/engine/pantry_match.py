"""
KitchAI Discovery - Pantry Match Calculator.

Presence-only matching: a recipe ingredient counts as matched when the
pantry holds the same canonical ingredient, regardless of quantity.

Matched/missing lists are plain display strings (canonical names), never
token objects; grocery-list and UI consumers rely on that.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from kitchai.config import settings
from kitchai.engine.normalizer import IngredientNormalizer, get_normalizer
from kitchai.errors import MalformedInputError
from kitchai.models import IngredientToken, MatchResult, PantryEntry, RecipeCandidate, RecipeIngredient

logger = logging.getLogger(__name__)

# "What can I cook" only lists recipes at or above this coverage
DEFAULT_MIN_MATCH_PERCENTAGE = 20


def resolve_workers(max_workers: int | None = None) -> int:
    """Worker count for batch stages: explicit, then settings, then CPU count."""
    return max(1, max_workers or settings.max_workers or os.cpu_count() or 1)


def _round_percentage(matched: int, total: int) -> int:
    if total == 0:
        return 0
    value = Decimal(matched * 100) / Decimal(total)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_pantry(
    pantry_entries: Iterable[PantryEntry],
    normalizer: IngredientNormalizer | None = None,
) -> frozenset[str]:
    """
    Normalize a pantry once into a set of canonical keys.

    Entries that cannot be normalized are skipped and logged.
    """
    normalizer = normalizer or get_normalizer()
    keys: set[str] = set()
    for entry in pantry_entries:
        try:
            keys.add(normalizer.require_token(entry.ingredient_name, entry.quantity, entry.unit).token.key)
        except MalformedInputError as e:
            logger.warning(f"Skipping pantry entry: {e}")
    return frozenset(keys)


def _recipe_tokens(
    ingredients: Iterable[RecipeIngredient],
    normalizer: IngredientNormalizer,
) -> list[IngredientToken]:
    """Distinct recipe tokens in first-seen order."""
    tokens: list[IngredientToken] = []
    seen: set[str] = set()
    for ingredient in ingredients:
        try:
            token = normalizer.require_token(ingredient.name, ingredient.quantity, ingredient.unit).token
        except MalformedInputError as e:
            logger.warning(f"Skipping recipe ingredient: {e}")
            continue
        if token.key not in seen:
            seen.add(token.key)
            tokens.append(token)
    return tokens


def match_against_keys(
    ingredients: Iterable[RecipeIngredient],
    pantry_keys: frozenset[str],
    normalizer: IngredientNormalizer | None = None,
) -> MatchResult:
    """Match a recipe against an already-normalized pantry."""
    normalizer = normalizer or get_normalizer()
    tokens = _recipe_tokens(ingredients, normalizer)

    matched = [t.canonical_name for t in tokens if t.key in pantry_keys]
    missing = [t.canonical_name for t in tokens if t.key not in pantry_keys]

    return MatchResult(
        match_percentage=_round_percentage(len(matched), len(tokens)),
        matched_ingredients=matched,
        missing_ingredients=missing,
    )


def compute_match(
    recipe_ingredients: Iterable[RecipeIngredient | str],
    pantry_entries: Iterable[PantryEntry],
    normalizer: IngredientNormalizer | None = None,
) -> MatchResult:
    """
    Compute how much of a recipe the pantry covers.

    Args:
        recipe_ingredients: Recipe lines (objects or plain names)
        pantry_entries: The user's pantry snapshot
        normalizer: Normalizer to use (shared default if omitted)

    Returns:
        MatchResult; 0% with empty lists for a recipe with no ingredients
    """
    normalizer = normalizer or get_normalizer()
    ingredients = [RecipeIngredient.from_value(i) if not isinstance(i, RecipeIngredient) else i for i in recipe_ingredients]
    return match_against_keys(ingredients, normalize_pantry(pantry_entries, normalizer), normalizer)


def compute_match_batch(
    recipe_candidates: Iterable[RecipeCandidate],
    pantry_entries: Iterable[PantryEntry],
    normalizer: IngredientNormalizer | None = None,
    max_workers: int | None = None,
) -> dict[str, MatchResult]:
    """
    Match many recipes against one pantry.

    The pantry is normalized once; recipes are matched in parallel. A
    failure on one recipe yields an empty 0% result for that id.
    """
    normalizer = normalizer or get_normalizer()
    pantry_keys = normalize_pantry(pantry_entries, normalizer)
    candidates = list(recipe_candidates)
    if not candidates:
        return {}

    def _match(candidate: RecipeCandidate) -> tuple[str, MatchResult]:
        try:
            return candidate.id, match_against_keys(candidate.ingredients, pantry_keys, normalizer)
        except Exception as e:
            logger.warning(f"Pantry match failed for recipe {candidate.id}: {e}")
            return candidate.id, MatchResult()

    workers = min(resolve_workers(max_workers), len(candidates))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = dict(executor.map(_match, candidates))

    logger.debug(f"Matched {len(results)} recipes against {len(pantry_keys)} pantry items")
    return results


def filter_by_match(
    results: dict[str, MatchResult],
    min_percentage: int = DEFAULT_MIN_MATCH_PERCENTAGE,
) -> list[str]:
    """Recipe ids at or above min_percentage, best coverage first."""
    eligible = [(rid, r.match_percentage) for rid, r in results.items() if r.match_percentage >= min_percentage]
    eligible.sort(key=lambda x: (-x[1], x[0]))
    return [rid for rid, _ in eligible]
