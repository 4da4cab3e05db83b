"""
KitchAI Discovery - Reference tables.

Built once at import time and read concurrently by every request. The
mappings are read-only views; reloading is a deploy, not a runtime call.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from kitchai.models import IngredientToken, UnitCategory
from kitchai.reference.ingredients import INGREDIENTS
from kitchai.tools.normalize import clean_name, name_key

# Bump when INGREDIENTS changes so cached match results can be invalidated
REFERENCE_VERSION = "2025.01.1"


@dataclass(frozen=True)
class ReferenceEntry:
    """An ingredient token plus how confident the table is about its unit family."""

    token: IngredientToken
    confidence: float


@dataclass(frozen=True, eq=False)
class ReferenceTables:
    """Immutable ingredient lookup indexes. Hashed by identity."""

    version: str
    entries: Mapping[str, ReferenceEntry]  # canonical name -> entry
    by_key: Mapping[str, str]  # name key -> canonical name
    by_alias: Mapping[str, str]  # alias key -> canonical name

    def get(self, canonical_name: str) -> ReferenceEntry | None:
        return self.entries.get(canonical_name)

    def __len__(self) -> int:
        return len(self.entries)


def build_reference_tables(
    rows: Mapping[str, tuple[UnitCategory, str, float, tuple[str, ...]]],
    version: str = REFERENCE_VERSION,
) -> ReferenceTables:
    """Index a raw ingredient table by canonical key and alias key."""
    entries: dict[str, ReferenceEntry] = {}
    by_key: dict[str, str] = {}
    by_alias: dict[str, str] = {}

    for raw_name, (category, default_unit, confidence, aliases) in rows.items():
        canonical = clean_name(raw_name)
        entries[canonical] = ReferenceEntry(
            token=IngredientToken(canonical, category, default_unit),
            confidence=confidence,
        )
        by_key[name_key(canonical)] = canonical
        for alias in aliases:
            by_alias.setdefault(name_key(alias), canonical)

    # A canonical name always wins over another entry's alias
    for key in by_key:
        by_alias.pop(key, None)

    return ReferenceTables(
        version=version,
        entries=MappingProxyType(entries),
        by_key=MappingProxyType(by_key),
        by_alias=MappingProxyType(by_alias),
    )


DEFAULT_TABLES = build_reference_tables(INGREDIENTS)

__all__ = [
    "DEFAULT_TABLES",
    "REFERENCE_VERSION",
    "ReferenceEntry",
    "ReferenceTables",
    "build_reference_tables",
]
