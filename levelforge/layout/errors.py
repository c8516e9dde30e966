"""Exception taxonomy for layout generation.

Only :class:`RecoverableLayoutError` subclasses trigger a full regeneration;
everything else propagates to the caller.
"""

from __future__ import annotations


class LayoutError(Exception):
    """Base class for all layout generation failures."""


class ConfigurationError(LayoutError):
    """Impossible configuration (e.g. more rooms than grid cells). Never retried."""


class RecoverableLayoutError(LayoutError):
    """Attempt-local failure; the generator discards the attempt and plans again."""


class NoMatchingTemplate(RecoverableLayoutError):
    """Template pool for a kind/category (or rotation) came up empty."""


class PlacementExhausted(RecoverableLayoutError):
    """A bounded sampling loop ran out of attempts."""


class OverlapConflict(RecoverableLayoutError):
    """Two placed rooms share a world position."""


class InvariantViolation(LayoutError):
    """Internal invariant broken (e.g. a filled cell without neighbors)."""


class RegenerationExhausted(LayoutError):
    """The attempt ceiling was reached without a valid layout."""

    def __init__(self, attempts: int, last_error: Exception | None = None):
        self.attempts = attempts
        self.last_error = last_error
        reason = f": {last_error}" if last_error else ""
        super().__init__(f"no valid layout after {attempts} attempts{reason}")


class GenerationCancelled(LayoutError):
    """Cancellation was requested between two phases."""


__all__ = [
    "LayoutError",
    "ConfigurationError",
    "RecoverableLayoutError",
    "NoMatchingTemplate",
    "PlacementExhausted",
    "OverlapConflict",
    "InvariantViolation",
    "RegenerationExhausted",
    "GenerationCancelled",
]
