"""
Error taxonomy for catalog and list operations.

Every error carries the HTTP status the API layer answers with, so routers
never translate errors by hand.
"""


class ShoppingListError(Exception):
    """Base class for all domain errors."""

    status_code = 400
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShoppingListError):
    """Empty or invalid input (blank product name, non-positive quantity)."""

    status_code = 422


class NotFoundError(ShoppingListError):
    """Referenced product, list or item does not exist."""

    status_code = 404


class ConflictError(ShoppingListError):
    """Catalog uniqueness race. Resolved inside ProductResolver, never surfaced."""

    status_code = 409


class InvalidStateError(ShoppingListError):
    """Mutation attempted on a completed list."""

    status_code = 409


class TransportError(ShoppingListError):
    """The store is unreachable or failed. Writes can be retried."""

    status_code = 503
    retryable = True


class CurrentListUnavailableError(TransportError):
    """Neither the stored pointer nor a fresh list could be established."""

    retryable = False
