"""
KitchAI Discovery - Ingredient Lookup Layer.

Multi-tier matching against the in-memory reference tables:
1. Exact match on canonical name (before and after qualifier stripping)
2. Exact match on aliases
3. Partial match: a canonical name whose words all appear in the input
   and that shares the input's head noun ("sea salt" -> salt)
4. Fuzzy match: rapidfuzz token_sort_ratio, scaled to 0.0-1.0

Fuzzy scores on common cases (threshold 0.85):
- "chiken" -> "chicken" ~ 0.92
- "letuce" -> "lettuce" ~ 0.92
- "tomato" -> "potato" ~ 0.83 (rejected)
- "garlic powder" -> "garlic" ~ 0.63
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from rapidfuzz import fuzz, process

from kitchai.models import UnitCategory
from kitchai.reference import DEFAULT_TABLES, ReferenceTables
from kitchai.tools.normalize import clean_name, singularize, strip_qualifiers

logger = logging.getLogger(__name__)

DEFAULT_FUZZY_THRESHOLD = 0.85

ALIAS_CONFIDENCE = 0.95
QUALIFIED_CONFIDENCE = 0.9  # Exact after dropping qualifiers
PARTIAL_CONFIDENCE = 0.8


@dataclass
class IngredientMatch:
    """Result of an ingredient lookup."""

    name: str  # Canonical name
    category: UnitCategory
    default_unit: str
    match_type: Literal["exact", "alias", "partial", "fuzzy"]
    confidence: float  # 0.0 to 1.0

    def __repr__(self) -> str:
        return f"IngredientMatch({self.name}, type={self.match_type}, conf={self.confidence:.2f})"


# =============================================================================
# Lookup tiers
# =============================================================================


def _to_match(
    tables: ReferenceTables,
    canonical: str,
    match_type: Literal["exact", "alias", "partial", "fuzzy"],
    confidence: float,
) -> IngredientMatch:
    token = tables.entries[canonical].token
    return IngredientMatch(
        name=token.canonical_name,
        category=token.category,
        default_unit=token.default_unit,
        match_type=match_type,
        confidence=round(confidence, 4),
    )


def lookup_exact(cleaned: str, tables: ReferenceTables = DEFAULT_TABLES) -> IngredientMatch | None:
    """Exact match on canonical name or alias, then again without qualifiers."""
    attempts = [(cleaned, 1.0)]
    stripped = strip_qualifiers(cleaned)
    if stripped != cleaned:
        attempts.append((stripped, QUALIFIED_CONFIDENCE))

    for text, confidence in attempts:
        key = singularize(text)
        if key in tables.by_key:
            return _to_match(tables, tables.by_key[key], "exact", confidence)
        if key in tables.by_alias:
            return _to_match(tables, tables.by_alias[key], "alias", min(confidence, ALIAS_CONFIDENCE))
    return None


def lookup_partial(cleaned: str, tables: ReferenceTables = DEFAULT_TABLES) -> IngredientMatch | None:
    """
    Longest canonical name contained in the input that shares its head noun.

    "roma tomatoes" -> tomatoes, "baby spinach" -> spinach, but
    "garlic powder" does not fall back to garlic.
    """
    words = singularize(strip_qualifiers(cleaned)).split()
    if len(words) < 2:
        return None
    word_set = set(words)
    head = words[-1]

    best: str | None = None
    best_len = 0
    for key, canonical in list(tables.by_key.items()) + list(tables.by_alias.items()):
        key_words = key.split()
        if key_words[-1] != head or not set(key_words) <= word_set:
            continue
        if len(key_words) > best_len:
            best, best_len = canonical, len(key_words)

    if best is None:
        return None
    return _to_match(tables, best, "partial", PARTIAL_CONFIDENCE)


@lru_cache(maxsize=4096)
def _best_fuzzy(key: str, tables: ReferenceTables) -> tuple[str | None, float]:
    # Canonical names come first so they win ties against aliases
    choices = list(tables.by_key) + list(tables.by_alias)
    found = process.extractOne(key, choices, scorer=fuzz.token_sort_ratio)
    if found is None:
        return None, 0.0
    choice, score, _ = found
    canonical = tables.by_key.get(choice) or tables.by_alias[choice]
    return canonical, score / 100.0


def lookup_fuzzy(
    cleaned: str,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> IngredientMatch | None:
    """Best fuzzy candidate if its similarity reaches the threshold."""
    canonical, score = best_fuzzy_score(cleaned, tables)
    if canonical is None or score < threshold:
        return None
    return _to_match(tables, canonical, "fuzzy", score)


def best_fuzzy_score(cleaned: str, tables: ReferenceTables = DEFAULT_TABLES) -> tuple[str | None, float]:
    """Closest canonical name and its similarity, whatever the score."""
    key = singularize(strip_qualifiers(cleaned))
    if not key:
        return None, 0.0
    return _best_fuzzy(key, tables)


def lookup_ingredient(
    name: str,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> IngredientMatch | None:
    """
    Look up an ingredient using chained matching strategies.

    Chain: exact -> alias -> partial -> fuzzy

    Args:
        name: Raw ingredient name
        threshold: Minimum fuzzy similarity to accept
        tables: Reference tables to search

    Returns:
        IngredientMatch if found, None otherwise
    """
    cleaned = clean_name(name or "")
    if not cleaned:
        return None

    match = lookup_exact(cleaned, tables)
    if match:
        return match

    match = lookup_partial(cleaned, tables)
    if match:
        logger.debug(f"Partial match: '{name}' -> {match.name}")
        return match

    match = lookup_fuzzy(cleaned, threshold, tables)
    if match:
        logger.debug(f"Fuzzy match: '{name}' -> {match.name} (conf={match.confidence:.2f})")
        return match

    logger.debug(f"No match found for: '{name}'")
    return None

