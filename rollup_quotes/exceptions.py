"""
Exception hierarchy for the quoting core.

Unresolved hardware selection is deliberately absent: it is a normal
calculation state reported on the result, not an error.
"""


class QuotingError(Exception):
    """Base class for all quoting errors."""


class InvalidInputError(QuotingError):
    """Dimensions, quantity or profile rejected before any pricing happens."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class CatalogUnavailableError(QuotingError):
    """The catalog repository could not be read; re-fetch before calculating."""


class PersistenceFailureError(QuotingError):
    """A save unit of work failed and was rolled back."""


class QuoteNotFoundError(QuotingError):
    def __init__(self, quote_id: str):
        super().__init__(f"Quote not found: {quote_id}")
        self.quote_id = quote_id


class InvalidStatusTransitionError(QuotingError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move quote from {current} to {target}")
        self.current = current
        self.target = target


class IdempotencyConflictError(QuotingError):
    """An idempotency key was reused for a different quote."""

    def __init__(self, idempotency_key: str, quote_id: str):
        super().__init__(
            f"Idempotency key {idempotency_key} already saved a different quote ({quote_id})"
        )
        self.idempotency_key = idempotency_key
        self.quote_id = quote_id
