"""Errors raised by the board's external collaborators.

None of these is fatal: location and insight failures are absorbed with a
fallback value, and a time-marker failure keeps the board in its loading view.
"""


class BoardError(Exception):
    """Base class for board errors."""


class LocationUnavailable(BoardError):
    """The device position could not be read (disabled, denied or failed)."""


class TimeMarkerLookupFailed(BoardError):
    """The daily time markers could not be fetched or were malformed."""


class InsightLookupFailed(BoardError):
    """The daily insight text could not be generated."""
