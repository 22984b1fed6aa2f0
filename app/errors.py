"""Typed errors raised by the pricing, quote and reporting domains"""


class QuoteAppError(Exception):
    """Base class for all application errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(QuoteAppError):
    """Catalog entry, quote record or backing document is missing"""

    status_code = 404


class InvalidInputError(QuoteAppError):
    """Malformed input such as an unknown soiling level or a negative count"""

    status_code = 400


class InvalidStatusError(InvalidInputError):
    """Status value outside pending/approved/completed/cancelled"""


class StorageError(QuoteAppError):
    """Read or write failure on a backing document"""

    status_code = 500


class NotificationError(QuoteAppError):
    """Email could not be rendered or delivered. Never surfaced to API callers."""

    status_code = 502
