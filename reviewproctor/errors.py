"""Exception hierarchy for Review Proctor.

A denied review is reported through :class:`reviewproctor.rules.Decision`,
never through these exceptions.  They only signal misuse or broken storage.
"""


class ReviewProctorError(RuntimeError):
    """Base class for Review Proctor errors."""


class StateStoreError(ReviewProctorError):
    """Raised when persisted state cannot be read or written."""


class UnknownThresholdError(ReviewProctorError, ValueError):
    """Raised when a threshold name is not one of the recognised names."""
