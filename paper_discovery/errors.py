"""Error taxonomy for paper discovery."""


class DiscoveryError(Exception):
    """Base class for discovery failures."""


class ClientInputError(DiscoveryError):
    """The request was malformed (e.g. missing or empty topic)."""


class SourceUnavailable(DiscoveryError):
    """A single provider could not produce candidates.

    Raised when a provider exhausted its retry budget, hit a network error,
    or returned a body that does not parse. The orchestrator absorbs it.
    """

    def __init__(self, source: str, message: str, status_code: int | None = None):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message
        self.status_code = status_code


class TotalUnavailable(DiscoveryError):
    """Every provider failed for this request."""
