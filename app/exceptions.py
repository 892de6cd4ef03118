"""
Engine error types.

A lookup that finds nothing is not an error: lookups return None and the
caller takes the "Not Eligible" / untouched branch.
"""


class ReferralEngineError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(ReferralEngineError):
    """A required collection is missing or not mapped to storage."""

    def __init__(self, collection: str, detail: str = ''):
        self.collection = collection
        message = f"Collection not found: {collection}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class EngineBusyError(ReferralEngineError):
    """Another entry point holds the engine lock."""
