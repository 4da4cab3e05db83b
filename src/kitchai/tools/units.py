"""
KitchAI Discovery - Unit Handling.

Maps unit spellings onto one base unit per category and converts linearly
within a category:
- liquid: ml, l, cup, tbsp, tsp, fl oz, ... -> ml
- weight: g, kg, lb, oz, ... -> g
- count: piece, item, can, clove, ... -> units

Units from different categories are never converted into each other.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

from kitchai.models import UnitCategory
from kitchai.tools.normalize import clean_unit, parse_quantity

BASE_UNITS = MappingProxyType({
    UnitCategory.LIQUID: "ml",
    UnitCategory.WEIGHT: "g",
    UnitCategory.COUNT: "units",
})

FALLBACK_UNIT = "units"

# canonical unit -> (category, factor to the category's base unit)
_CONVERSIONS: dict[str, tuple[UnitCategory, float]] = {
    # Liquid
    "ml": (UnitCategory.LIQUID, 1.0),
    "cl": (UnitCategory.LIQUID, 10.0),
    "dl": (UnitCategory.LIQUID, 100.0),
    "l": (UnitCategory.LIQUID, 1000.0),
    "tsp": (UnitCategory.LIQUID, 4.92892),
    "tbsp": (UnitCategory.LIQUID, 14.7868),
    "fl oz": (UnitCategory.LIQUID, 29.5735),
    "cup": (UnitCategory.LIQUID, 236.588),
    "pint": (UnitCategory.LIQUID, 473.176),
    "quart": (UnitCategory.LIQUID, 946.353),
    "gallon": (UnitCategory.LIQUID, 3785.41),
    # Weight
    "mg": (UnitCategory.WEIGHT, 0.001),
    "g": (UnitCategory.WEIGHT, 1.0),
    "kg": (UnitCategory.WEIGHT, 1000.0),
    "oz": (UnitCategory.WEIGHT, 28.3495),
    "lb": (UnitCategory.WEIGHT, 453.592),
    # Count - every countable unit is one "units"
    "units": (UnitCategory.COUNT, 1.0),
    "can": (UnitCategory.COUNT, 1.0),
    "bottle": (UnitCategory.COUNT, 1.0),
    "bag": (UnitCategory.COUNT, 1.0),
    "box": (UnitCategory.COUNT, 1.0),
    "package": (UnitCategory.COUNT, 1.0),
    "bunch": (UnitCategory.COUNT, 1.0),
    "head": (UnitCategory.COUNT, 1.0),
    "clove": (UnitCategory.COUNT, 1.0),
    "slice": (UnitCategory.COUNT, 1.0),
    "stick": (UnitCategory.COUNT, 1.0),
    "dozen": (UnitCategory.COUNT, 12.0),
    # Other - measured loosely, kept as-is
    "pinch": (UnitCategory.OTHER, 1.0),
    "dash": (UnitCategory.OTHER, 1.0),
    "handful": (UnitCategory.OTHER, 1.0),
    "sprig": (UnitCategory.OTHER, 1.0),
}

CONVERSIONS = MappingProxyType(_CONVERSIONS)

_ALIASES: dict[str, list[str]] = {
    "ml": ["ml", "milliliter", "milliliters", "millilitre", "millilitres", "mls"],
    "cl": ["cl", "centiliter", "centiliters"],
    "dl": ["dl", "deciliter", "deciliters"],
    "l": ["l", "liter", "liters", "litre", "litres", "ltr"],
    "tsp": ["tsp", "tsps", "teaspoon", "teaspoons", "t"],
    "tbsp": ["tbsp", "tbsps", "tbs", "tablespoon", "tablespoons", "tbl"],
    "fl oz": ["fl oz", "floz", "fl_oz", "fluid ounce", "fluid ounces"],
    "cup": ["cup", "cups", "c"],
    "pint": ["pint", "pints", "pt"],
    "quart": ["quart", "quarts", "qt"],
    "gallon": ["gallon", "gallons", "gal"],
    "mg": ["mg", "milligram", "milligrams"],
    "g": ["g", "gr", "gram", "grams", "gramme", "grammes"],
    "kg": ["kg", "kgs", "kilo", "kilos", "kilogram", "kilograms"],
    "oz": ["oz", "ounce", "ounces"],
    "lb": ["lb", "lbs", "pound", "pounds"],
    "units": [
        "units", "unit", "piece", "pieces", "pc", "pcs", "item", "items",
        "count", "each", "ea", "whole", "serving", "servings",
    ],
    "can": ["can", "cans", "tin", "tins"],
    "bottle": ["bottle", "bottles"],
    "bag": ["bag", "bags"],
    "box": ["box", "boxes"],
    "package": ["package", "packages", "pkg", "pkgs", "pack", "packs", "container", "containers"],
    "bunch": ["bunch", "bunches"],
    "head": ["head", "heads"],
    "clove": ["clove", "cloves"],
    "slice": ["slice", "slices"],
    "stick": ["stick", "sticks"],
    "dozen": ["dozen", "dz"],
    "pinch": ["pinch", "pinches"],
    "dash": ["dash", "dashes"],
    "handful": ["handful", "handfuls"],
    "sprig": ["sprig", "sprigs"],
}

# Reverse lookup: spelling -> canonical unit
UNIT_LOOKUP = MappingProxyType({
    spelling: canonical
    for canonical, spellings in _ALIASES.items()
    for spelling in spellings
})


@dataclass
class ParsedQuantity:
    """A quantity expressed in its category's base unit."""

    value: float | None
    unit: str
    category: UnitCategory
    original: str  # Original input for reference
    recognized: bool = True  # False when the unit string was unknown


class UnitHandler:
    """Unit parsing, categorization and same-category conversion."""

    @staticmethod
    def canonical_unit(unit: str | None) -> str | None:
        """Canonical spelling for a unit string, or None if unknown/blank."""
        cleaned = clean_unit(unit)
        if not cleaned:
            return None
        if cleaned in UNIT_LOOKUP:
            return UNIT_LOOKUP[cleaned]
        # "tbsp." / "Cups" style leftovers
        stripped = cleaned.rstrip("s")
        return UNIT_LOOKUP.get(stripped)

    @classmethod
    def category_of(cls, unit: str | None) -> UnitCategory:
        """Category of a unit; unknown units count as COUNT."""
        canonical = cls.canonical_unit(unit)
        if canonical is None:
            return UnitCategory.COUNT
        return CONVERSIONS[canonical][0]

    @classmethod
    def is_known(cls, unit: str | None) -> bool:
        return cls.canonical_unit(unit) is not None

    @classmethod
    def parse(cls, quantity: float | Decimal | str | None, unit: str | None) -> ParsedQuantity:
        """
        Convert a quantity to its category's base unit.

        Unknown units fall back to "units" with recognized=False; this
        never raises.

        Examples:
            parse(1, "l") -> ParsedQuantity(1000.0, "ml", LIQUID, ...)
            parse("1/2", "kg") -> ParsedQuantity(500.0, "g", WEIGHT, ...)
            parse(3, "handfulz") -> ParsedQuantity(3.0, "units", COUNT, recognized=False)
        """
        value = parse_quantity(quantity)
        original = f"{quantity if quantity is not None else ''} {unit or ''}".strip()
        canonical = cls.canonical_unit(unit)

        if canonical is None:
            return ParsedQuantity(
                value=value,
                unit=FALLBACK_UNIT,
                category=UnitCategory.COUNT,
                original=original,
                recognized=False,
            )

        category, factor = CONVERSIONS[canonical]
        base = BASE_UNITS.get(category, canonical)
        return ParsedQuantity(
            value=parse_quantity(value * factor) if value is not None else None,
            unit=base,
            category=category,
            original=original,
        )

