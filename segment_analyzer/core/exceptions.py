"""
Exceptions raised while analyzing segments.
"""


class SegmentAnalyzerError(Exception):
    """Base class for segment analysis failures."""


class InventoryLookupError(SegmentAnalyzerError, LookupError):
    """An id could not be resolved by an inventory cache."""

    def __init__(self, scope: str, key):
        self.scope = scope
        self.key = key
        super().__init__(f"No {scope} registered for {key!r}")


class IncompleteSourceError(SegmentAnalyzerError, ValueError):
    """A source builder was converted before it was fully populated."""


class SegmentFormatError(SegmentAnalyzerError, ValueError):
    """A segment document could not be decoded."""
