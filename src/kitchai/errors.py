"""
KitchAI Discovery - Error types.

Three families:
- DataUnavailableError: the fetch layer failed; transient unless the
  failure will repeat (a broken fixture, a schema mismatch)
- BadRequestError: invalid user id, recipe id or paging arguments
- ConfigurationError: weight/threshold tables are invalid; always fatal

MalformedInputError is raised for a single ingredient and is expected to be
caught by the per-item loop that produced it.
"""


class DiscoveryError(Exception):
    """Base class for discovery engine errors."""


class DataUnavailableError(DiscoveryError):
    """An upstream fetch failed."""

    def __init__(self, message: str, *, source: str | None = None, transient: bool = True):
        super().__init__(message)
        self.source = source
        self.transient = transient


class TransientFetchError(DataUnavailableError):
    """An upstream fetch failed in a way that is worth retrying."""

    def __init__(self, message: str, *, source: str | None = None):
        super().__init__(message, source=source, transient=True)


class BadRequestError(DiscoveryError):
    """Invalid user id, recipe id, or paging arguments."""


class RecipeNotFoundError(BadRequestError):
    """The requested recipe does not exist or is not visible."""

    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe '{recipe_id}' not found")
        self.recipe_id = recipe_id


class MalformedInputError(DiscoveryError):
    """A single ingredient or unit string could not be normalized."""

    def __init__(self, raw: str, reason: str):
        super().__init__(f"Cannot normalize '{raw}': {reason}")
        self.raw = raw
        self.reason = reason


class ConfigurationError(DiscoveryError):
    """Weight profile or threshold tables are missing or invalid."""
