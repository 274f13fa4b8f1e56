"""Error taxonomy shared by adapters, the session orchestrator and the API."""


class ChainViewError(Exception):
    """Base error. ``str(exc)`` is the message shown to the user."""


class InvalidAddressError(ChainViewError):
    """Address does not match the selected chain's format. Raised before any network call."""


class UnknownChainError(ChainViewError):
    """No adapter is registered under the requested chain id."""


class ExternalServiceError(ChainViewError):
    """Transport failure: network error, timeout, non-2xx status or undecodable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ExternalServiceError):
    """Upstream API throttled the request (HTTP 429 or a rate-limit message in the payload)."""


class UpstreamError(ChainViewError):
    """HTTP 200 whose payload carries an application-level failure code."""


class DataIntegrityError(ChainViewError):
    """A record cannot be classified without guessing (e.g. a perps fill with no open/close signal)."""


class HostNotAllowedError(ChainViewError):
    """Relay target hostname is not on the allow-list."""
