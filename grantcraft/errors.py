"""
Error Taxonomy

Every failure the scoring engine can raise. None of these are
recovered inside the engine: a caught-and-ignored signal failure
would silently change a criterion's effective weight denominator.
"""

from __future__ import annotations


class GrantCraftError(Exception):
    """Base class for all engine errors."""


class RubricConfigurationError(GrantCraftError):
    """A rubric failed validation at construction (weights, ids, criteria)."""


class SignalNotFoundError(GrantCraftError, LookupError):
    """A signal id was requested that the registry does not hold."""


class UnknownSchemeError(GrantCraftError, LookupError):
    """No rubric is registered for the requested scheme id."""


class SignalCheckError(GrantCraftError):
    """A signal's check raised or returned an out-of-contract result."""

    def __init__(self, signal_id: str, message: str):
        self.signal_id = signal_id
        super().__init__(f"Signal {signal_id!r} failed: {message}")


class DraftTooShortError(GrantCraftError, ValueError):
    """Raised by callers (API, CLI) before the engine is invoked."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Draft is too short to review meaningfully "
            f"(minimum {minimum} characters, got {length})."
        )
