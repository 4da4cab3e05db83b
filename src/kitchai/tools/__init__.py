"""
KitchAI Discovery - Ingredient tools.

- normalize: name/unit string cleanup and quantity parsing
- units: unit categories and linear conversion to base units
- ingredient_lookup: exact/alias/partial/fuzzy lookup in the reference tables
"""
