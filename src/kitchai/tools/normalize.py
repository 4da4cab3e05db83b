"""
KitchAI Discovery - Name Normalization.

Utilities for turning free-text ingredient names, units and quantities
into comparable strings. Everything here is pure string work; the
reference-table lookups live in ingredient_lookup.
"""

import math
import re
from decimal import Decimal
from fractions import Fraction

# Words that describe how an ingredient is prepared or bought, not what it is.
# Stripped only after an exact lookup on the full name fails, so table
# entries like "ground beef" or "smoked paprika" still match as-is.
QUALIFIERS = {
    # preparation
    "diced", "minced", "chopped", "sliced", "cubed", "shredded", "grated",
    "crushed", "mashed", "pureed", "ground", "crumbled", "halved",
    "quartered", "peeled", "trimmed", "julienned", "torn", "softened",
    "melted", "beaten", "sifted", "rinsed", "drained", "finely", "roughly",
    "thinly", "coarsely",
    # state
    "raw", "cooked", "roasted", "grilled", "fried", "steamed", "baked",
    "fresh", "frozen", "canned", "dried", "smoked", "pickled", "chilled",
    # quality
    "boneless", "skinless", "organic", "extra", "virgin", "unsalted",
    "salted", "unsweetened", "sweetened", "low-sodium", "reduced-fat",
    "free-range", "grass-fed", "wild-caught", "homemade", "store-bought",
    # size
    "large", "medium", "small", "big", "thick", "thin", "whole", "baby",
    # filler
    "of", "a", "an", "the", "some", "any", "about", "optional",
}

# Trailing phrases that never belong to the ingredient identity
_TRAILING_PHRASES = re.compile(
    r",.*$|\bto taste\b|\bfor garnish\b|\bfor serving\b|\bas needed\b|\bif desired\b"
)
_PARENTHETICAL = re.compile(r"\s*\(.*?\)\s*")
_NON_WORD = re.compile(r"[^a-z0-9\s\-]")


def normalize_name(name: str) -> str:
    """
    Normalize a name for consistent matching.

    Operations:
    - Lowercase
    - Strip leading/trailing whitespace
    - Collapse multiple spaces to single space

    Examples:
        normalize_name("  Chicken Thighs  ") -> "chicken thighs"
        normalize_name("green   pepper") -> "green pepper"
    """
    return " ".join(name.lower().strip().split())


def clean_name(name: str) -> str:
    """
    Remove parentheticals, trailing notes and punctuation from a name.

    Qualifiers are kept; see strip_qualifiers.

    Examples:
        clean_name("Parmesan Cheese (grated), to taste") -> "parmesan cheese"
        clean_name("Olive oil*") -> "olive oil"
    """
    text = normalize_name(name)
    text = _PARENTHETICAL.sub(" ", text)
    text = _TRAILING_PHRASES.sub("", text)
    text = _NON_WORD.sub(" ", text)
    return normalize_name(text)


def strip_qualifiers(name: str) -> str:
    """
    Drop preparation/quality/size words from an already-cleaned name.

    Returns the input unchanged if stripping would leave nothing
    (e.g. "large" alone).
    """
    words = [w for w in name.split() if w not in QUALIFIERS]
    return " ".join(words) if words else name


def singularize(word: str) -> str:
    """
    Best-effort singular form of the last word in a name.

    Both sides of every comparison go through this, so the rules only
    need to be consistent, not linguistically complete.
    """
    if not word:
        return word
    head, _, last = word.rpartition(" ")
    if len(last) > 4 and last.endswith("ies"):
        last = last[:-3] + "y"
    elif len(last) > 4 and last.endswith(("oes", "ches", "shes", "xes")):
        last = last[:-2]
    elif len(last) > 3 and last.endswith("s") and not last.endswith(("ss", "us", "is")):
        last = last[:-1]
    return f"{head} {last}" if head else last


def name_key(name: str) -> str:
    """Identity key used to compare canonical names: cleaned and singular."""
    return singularize(clean_name(name))


def clean_unit(unit: str | None) -> str:
    """
    Clean a unit string for alias lookup.

    Args:
        unit: Raw unit input (e.g., "LBS", " Tbsp. ", "fl. oz")

    Returns:
        Lowercased unit with dots and extra spaces removed; "" for None
    """
    if not unit:
        return ""
    unit = unit.lower().replace(".", " ").strip()
    return " ".join(unit.split())


def _non_negative(number: float) -> float | None:
    return number if math.isfinite(number) and number >= 0 else None


def parse_quantity(value: float | int | Decimal | str | None) -> float | None:
    """
    Parse a quantity that may be a number, decimal string or fraction.

    Negative, non-finite and out-of-range values give None, as does
    anything that is neither a number nor a string.

    Examples:
        parse_quantity("1/2") -> 0.5
        parse_quantity("1 1/2") -> 1.5
        parse_quantity("2,5") -> 2.5
        parse_quantity(Decimal("400")) -> 400.0
        parse_quantity("a pinch") -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal, Fraction)):
        try:
            return _non_negative(float(value))
        except (OverflowError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip().replace(",", ".")
    if not text:
        return None

    total = Fraction(0)
    try:
        for part in text.split():
            total += Fraction(part)
        return _non_negative(float(total))
    except (ValueError, ZeroDivisionError, OverflowError):
        return None


def extract_quantity_unit(text: str, known_units: set[str]) -> tuple[float | None, str | None, str]:
    """
    Extract quantity and unit from a text string.

    Args:
        text: Text like "3 lbs of chicken" or "2 cups flour"
        known_units: Unit spellings to recognize after the quantity

    Returns:
        Tuple of (quantity, unit, remaining_text)
        Returns (None, None, text) if no quantity found

    Examples:
        "3 lbs chicken" -> (3.0, "lbs", "chicken")
        "chicken" -> (None, None, "chicken")
        "1/2 cup flour" -> (0.5, "cup", "flour")
    """
    text = text.strip()

    # Fractions first so they match before whole numbers
    match = re.match(r"^(\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?)\s*", text)
    if not match:
        return (None, None, text)

    quantity = parse_quantity(match.group(1))
    remaining = text[match.end():].strip()

    # Two-word units ("fl oz") before single words
    lowered = remaining.lower()
    for size in (2, 1):
        words = lowered.split()
        if len(words) <= size:
            continue
        candidate = clean_unit(" ".join(words[:size]))
        if candidate in known_units:
            rest = " ".join(remaining.split()[size:])
            rest = re.sub(r"^of\s+", "", rest, flags=re.IGNORECASE)
            return (quantity, candidate, rest.strip())

    return (quantity, None, remaining)
