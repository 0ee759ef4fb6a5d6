"""Error types raised by record sources and the save pipeline."""


class TrackerError(Exception):
    """Base error for the habit tracker."""


class NetworkError(TrackerError):
    """A remote or static fetch failed or returned a non-OK status."""


class ParseError(NetworkError):
    """A response body could not be decoded."""


class StaleVersionError(NetworkError):
    """A conditional write was rejected because the remote changed."""


class ValidationError(TrackerError):
    """A record failed local validation before any network call."""


class CredentialMissing(TrackerError):
    """The configured backend needs a credential and none is available."""
