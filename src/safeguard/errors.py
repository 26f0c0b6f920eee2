"""Error taxonomy for classification and moderation.

Only ``ValidationError`` and ``InvariantViolation`` ever reach callers of
the lifecycle.  ``AnalysisFailure`` is absorbed into a fallback
classification, and "not found" is a normal result value, not an error.
"""


class SafeguardError(Exception):
    """Base error for the safeguard package."""


class ValidationError(SafeguardError):
    """Input rejected before any record was created or changed."""


class InvariantViolation(SafeguardError):
    """Configuration or programming error, fatal to the current operation."""


class AnalysisFailure(SafeguardError):
    """A media analyzer failed, stalled, or returned an unusable result."""
