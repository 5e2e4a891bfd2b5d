#!/usr/bin/env python3
"""
SKOLL - Custom Exception Hierarchy

Structured error types for precise error handling.
Every failure is terminal for the call that raised it; nothing is retried here.
"""


class SkollError(Exception):
    """Base exception for all SKOLL errors."""

    pass


class ConfigError(SkollError):
    """Invalid or missing configuration."""

    pass


class InvalidAddressError(SkollError):
    """A string could not be parsed as an asset or account address."""

    pass


class UnauthorizedError(SkollError):
    """A mutating call was made by someone who is not the administrator."""

    def __init__(self, message: str = "Ownable: caller is not the owner"):
        super().__init__(message)


class OracleError(SkollError):
    """The registry could not produce a price for the requested pair."""

    def __init__(self, message: str = "Price feed not available"):
        super().__init__(message)


class PairNotFoundError(OracleError):
    """No feed is registered for the unordered pair."""

    pass


class FeedUnavailableError(OracleError):
    """The raw price source has no usable data for a resolved identifier."""

    pass


class PriceSourceError(SkollError):
    """Upstream quotation service failure while refreshing a price source."""

    pass


class ValuationError(SkollError):
    """Portfolio valuation failure."""

    pass


class NegativeValuationError(ValuationError):
    """Aggregate portfolio value fell below zero after signed accumulation."""

    def __init__(self, message: str = "SafeCast: value must be positive"):
        super().__init__(message)


class FixedPointOverflowError(ValuationError):
    """A fixed-point intermediate left the 256-bit range."""

    pass
