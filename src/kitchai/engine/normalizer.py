"""
KitchAI Discovery - Unit & Ingredient Normalizer.

normalize(raw_name, raw_quantity, raw_unit) turns one free-text ingredient
into a NormalizedIngredient: canonical token, quantity in the base unit of
its category, and flags describing how much of that was guessed.

Never raises for bad input. A name that cannot be recognized even as a
fallback comes back with token=None; callers that need a token use
require_token(), which raises MalformedInputError for that single item.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from kitchai.config import settings
from kitchai.errors import MalformedInputError
from kitchai.models import IngredientToken, NormalizedIngredient, PantryEntry, UnitCategory
from kitchai.reference import DEFAULT_TABLES, ReferenceTables
from kitchai.tools.ingredient_lookup import best_fuzzy_score, lookup_ingredient
from kitchai.tools.normalize import clean_name, extract_quantity_unit, strip_qualifiers
from kitchai.tools.units import BASE_UNITS, FALLBACK_UNIT, UNIT_LOOKUP, UnitHandler

logger = logging.getLogger(__name__)

_KNOWN_UNIT_SPELLINGS = frozenset(UNIT_LOOKUP)


@dataclass
class MergeCheck:
    """Whether two pantry entries can be merged into one."""

    compatible: bool
    reason: str
    merged_quantity: float | None = None
    unit: str | None = None


@dataclass
class UnitSuggestion:
    """Unit advice for a manually entered pantry item."""

    should_normalize: bool
    suggested_unit: str
    reason: str = ""


def _is_plausible_name(cleaned: str) -> bool:
    letters = sum(ch.isalpha() for ch in cleaned)
    return letters >= 2


class IngredientNormalizer:
    """
    Normalizer bound to a set of reference tables and thresholds.

    Instances hold no mutable state and are safe to share across threads.
    """

    def __init__(
        self,
        tables: ReferenceTables = DEFAULT_TABLES,
        fuzzy_threshold: float | None = None,
        unknown_floor: float | None = None,
    ):
        self.tables = tables
        self.fuzzy_threshold = settings.fuzzy_threshold if fuzzy_threshold is None else fuzzy_threshold
        self.unknown_floor = settings.unknown_floor if unknown_floor is None else unknown_floor

    # -------------------------------------------------------------------------
    # Names
    # -------------------------------------------------------------------------

    def _resolve_token(self, name: str, unit_category: UnitCategory | None) -> tuple[IngredientToken | None, float, str]:
        match = lookup_ingredient(name, self.fuzzy_threshold, self.tables)
        if match:
            token = self.tables.entries[match.name].token
            return token, match.confidence, match.match_type

        cleaned = strip_qualifiers(clean_name(name))
        if not _is_plausible_name(cleaned):
            return None, 0.0, "unknown"

        # Below the floor nothing in the table is close; the name is still kept
        # as its own identity at floor confidence
        _, score = best_fuzzy_score(cleaned, self.tables)
        confidence = max(score, self.unknown_floor)

        # Not in the table: the ingredient stands for itself. Its family comes
        # from the unit it was entered with, if that unit is known.
        category = unit_category or UnitCategory.COUNT
        default_unit = BASE_UNITS.get(category, FALLBACK_UNIT)
        return IngredientToken(cleaned, category, default_unit), round(confidence, 4), "fallback"

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def normalize(
        self,
        raw_name: str | None,
        raw_quantity: float | Decimal | str | None = None,
        raw_unit: str | None = None,
    ) -> NormalizedIngredient:
        """
        Normalize one ingredient.

        Examples:
            normalize("Olive Oil", 1, "l") -> olive oil, 1000.0 ml
            normalize("2 cups flour") -> flour, 473.176 ml (category_mismatch)
            normalize("olive oil", 1, "unit") -> olive oil, 1 units (category_mismatch)
        """
        name = raw_name if isinstance(raw_name, str) else ""
        unit = raw_unit if isinstance(raw_unit, str) or raw_unit is None else str(raw_unit)

        # "2 cups flour" with no separate quantity/unit
        if raw_quantity is None and not unit:
            qty, parsed_unit, rest = extract_quantity_unit(name, _KNOWN_UNIT_SPELLINGS)
            if qty is not None:
                raw_quantity, unit, name = qty, parsed_unit, rest

        unit_known = UnitHandler.is_known(unit)
        token, confidence, match_type = self._resolve_token(
            name, UnitHandler.category_of(unit) if unit_known else None
        )

        if not unit:
            # No unit given: the ingredient's default unit, nothing assumed
            default = token.default_unit if token else FALLBACK_UNIT
            parsed = UnitHandler.parse(raw_quantity, default)
            unit_assumed = False
        else:
            parsed = UnitHandler.parse(raw_quantity, unit)
            unit_assumed = not parsed.recognized
            if unit_assumed:
                logger.debug(f"Unknown unit '{unit}' for '{name}', assuming {FALLBACK_UNIT}")

        category_mismatch = bool(
            token
            and unit
            and not unit_assumed
            and UnitCategory.OTHER not in (token.category, parsed.category)
            and parsed.category != token.category
        )

        return NormalizedIngredient(
            raw_name=raw_name if isinstance(raw_name, str) else "",
            raw_unit=raw_unit if isinstance(raw_unit, str) else None,
            token=token,
            quantity=parsed.value,
            unit=parsed.unit,
            unit_category=parsed.category,
            confidence=confidence,
            match_type=match_type,
            unit_assumed=unit_assumed,
            category_mismatch=category_mismatch,
        )

    def require_token(self, raw_name: str | None, raw_quantity=None, raw_unit: str | None = None) -> NormalizedIngredient:
        """
        Normalize, raising MalformedInputError if no token could be assigned.

        Used by per-item loops that skip and log bad ingredients.
        """
        result = self.normalize(raw_name, raw_quantity, raw_unit)
        if result.token is None:
            raise MalformedInputError(str(raw_name), "no recognizable ingredient name")
        return result

    def check_merge(self, existing: PantryEntry, incoming: PantryEntry) -> MergeCheck:
        """
        Decide whether two pantry entries can be merged.

        Entries merge only when they are the same canonical ingredient and
        their units share a category; quantities are then summed in the
        base unit. Count vs liquid (e.g. "1 unit" vs "400 ml" of olive oil)
        is never summed.
        """
        a = self.normalize(existing.ingredient_name, existing.quantity, existing.unit)
        b = self.normalize(incoming.ingredient_name, incoming.quantity, incoming.unit)

        if a.token is None or b.token is None:
            return MergeCheck(False, "unrecognized ingredient")
        if a.token.key != b.token.key:
            return MergeCheck(False, f"different ingredients: {a.token} vs {b.token}")
        if a.unit_category != b.unit_category:
            return MergeCheck(
                False,
                f"incompatible units: {a.unit_category.value} vs {b.unit_category.value}",
            )
        if a.unit != b.unit:
            # Same OTHER-family category but different loose units (pinch vs dash)
            return MergeCheck(False, f"incompatible units: {a.unit} vs {b.unit}")

        merged = None
        if a.quantity is not None and b.quantity is not None:
            merged = a.quantity + b.quantity
        return MergeCheck(True, "same ingredient and unit family", merged, a.unit)

    def suggest_unit(self, item_name: str, current_unit: str) -> UnitSuggestion:
        """
        Suggest a better unit for a pantry item, if the table is confident.

        "olive oil" in "units" -> ml; "flour" in "ml" -> g.
        """
        match = lookup_ingredient(item_name, self.fuzzy_threshold, self.tables)
        if match is None:
            return UnitSuggestion(False, current_unit)

        entry = self.tables.entries[match.name]
        # Fuzzy/partial matches are less certain about the unit family too
        confidence = entry.confidence if match.match_type in ("exact", "alias") else entry.confidence * 0.8
        default_unit = entry.token.default_unit
        current = UnitHandler.canonical_unit(current_unit)

        if current == FALLBACK_UNIT and default_unit != FALLBACK_UNIT:
            return UnitSuggestion(
                True, default_unit, f'"{item_name}" is typically measured in {default_unit}'
            )

        current_category = UnitHandler.category_of(current_unit)
        if current_category != entry.token.category and confidence > 0.7:
            return UnitSuggestion(
                True,
                default_unit,
                f'"{item_name}" is a {entry.token.category.value} ingredient, '
                f"better measured in {default_unit}",
            )

        return UnitSuggestion(False, current_unit)


_default_normalizer: IngredientNormalizer | None = None


def get_normalizer() -> IngredientNormalizer:
    """Shared normalizer over the default reference tables."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = IngredientNormalizer()
    return _default_normalizer


def normalize(
    raw_name: str | None,
    raw_quantity: float | Decimal | str | None = None,
    raw_unit: str | None = None,
) -> NormalizedIngredient:
    """normalize() on the shared normalizer."""
    return get_normalizer().normalize(raw_name, raw_quantity, raw_unit)


def check_merge(existing: PantryEntry, incoming: PantryEntry) -> MergeCheck:
    """check_merge() on the shared normalizer."""
    return get_normalizer().check_merge(existing, incoming)
