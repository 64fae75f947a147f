"""
Domain-specific exception hierarchy for the slot finder.
"""


class SlotFinderError(Exception):
    """Base class for all application-level errors."""


class InvalidConfiguration(SlotFinderError):
    """Raised when a configuration breaks a structural or semantic rule."""


class InvalidSearchWindow(SlotFinderError):
    """Raised when the requested search boundaries are malformed or unordered."""
