"""Custom exceptions for podfeed."""


class PodfeedError(Exception):
    """Base exception for all podfeed errors."""

    pass


class ConfigError(PodfeedError):
    """Configuration-related errors."""

    pass


class InvalidRequestError(PodfeedError):
    """The caller did not supply a usable import request."""

    pass


class FetchError(PodfeedError):
    """The feed URL was unreachable or returned a non-success status."""

    pass


class FormatError(PodfeedError):
    """The response body has no parseable channel structure."""

    pass
