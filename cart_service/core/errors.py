"""Cart error taxonomy

Every failure a cart operation can report carries the HTTP status it maps to
and a message that is safe to hand back to a client. Internal detail stays in
the exception arguments and the logs.
"""

from typing import Optional


class CartError(Exception):
    """Base class for cart failures"""

    status_code: int = 500
    public_message: str = "Internal server error."

    def __init__(self, detail: str = "", public_message: Optional[str] = None):
        super().__init__(detail or self.public_message)
        self.detail = detail
        if public_message is not None:
            self.public_message = public_message


class InvalidInput(CartError):
    """Malformed or out-of-range request field"""

    status_code = 400
    public_message = "Invalid item ID or quantity provided."


class NotFound(CartError):
    """Referenced product or cart item is absent"""

    status_code = 404
    public_message = "Not found."


class CorruptSource(CartError):
    """Guest cart document cannot be parsed during migration"""

    status_code = 500
    public_message = "Failed to migrate cart."


class StorageFailure(CartError):
    """Underlying blob store read or write failed"""

    status_code = 500
    public_message = "Internal server error."


class UnauthenticatedMerge(CartError):
    """Migration requested for a session the caller does not hold"""

    status_code = 403
    public_message = "Invalid cart session."
