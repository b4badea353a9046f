"""Errors raised while fetching and scraping CI signal."""


class SignalHoundError(Exception):
    """Base class for pipeline errors."""


class TransportError(SignalHoundError):
    """Raised when a request cannot be sent or its response cannot be read."""


class DecodeError(SignalHoundError):
    """Raised when a response body is not the expected JSON shape."""


class ScrapeError(SignalHoundError):
    """Raised when an HTML page lacks the markers needed to extract data."""
