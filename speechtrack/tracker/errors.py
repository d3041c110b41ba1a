"""
Error taxonomy for the tracker.

All errors are raised synchronously and leave store state untouched.
"""


class TrackerError(Exception):
    """Base class for every error raised by the tracking core."""


class NotFoundError(TrackerError, LookupError):
    """Referenced child, category or goal does not exist."""


class InvalidReferenceError(TrackerError, ValueError):
    """Goal does not belong to the stated category."""


class IncompleteSessionError(TrackerError, ValueError):
    """Session submitted with unmarked activities, no therapist or a future date."""


class SessionAlreadySubmittedError(TrackerError):
    """Recorder was already submitted and is now read-only."""


class InvariantViolation(TrackerError, RuntimeError):
    """A mutation would break a progress invariant. Indicates a bug."""
