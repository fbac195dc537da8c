class TrackerError(Exception):
    """Base class for errors surfaced to the user as a notification."""


class ValidationError(TrackerError, ValueError):
    """Malformed user input, detected before any network call."""


class LookupNotFound(TrackerError):
    """A lookup by identity, barcode or text returned nothing."""


class TransportError(TrackerError):
    """Network or HTTP failure while talking to a collaborator."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InconsistentResponse(TransportError):
    """Success-coded response missing an expected field."""


class InvalidTransition(TrackerError):
    """Operation not permitted in the current selection phase."""
