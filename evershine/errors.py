"""
Pricing error kinds.

Missing agent/client records are not errors here: the resolver degrades
them to rate 0 and only logs a warning.
"""


class PricingError(Exception):
    """Base class for pricing failures surfaced to callers."""

    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(PricingError):
    """Malformed id, negative/NaN price or unusable rate. Never retried."""


class NotFound(PricingError):
    """A record the operation cannot proceed without does not exist."""


class UpstreamUnavailable(PricingError):
    """The persistence layer failed; the caller may retry."""

    retryable = True
