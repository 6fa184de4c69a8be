"""Exceptions raised by the tracker."""


class StudyTrackerError(Exception):
    """Base class for all tracker errors."""


class NotFoundError(StudyTrackerError, LookupError):
    """A subject, chapter or topic id did not resolve."""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.id = item_id
        super().__init__(f"{kind.capitalize()} not found: {item_id}")


class ValidationError(StudyTrackerError, ValueError):
    """Input rejected before any storage call."""


class AuthenticationError(StudyTrackerError):
    """Bad credentials or an email that is already registered."""
