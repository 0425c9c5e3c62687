# backend/services/errors.py
"""Failure taxonomy of the checkout core.

Every error is per-request: handlers in ``main.py`` turn it into a JSON
response with the status code declared on the class.
"""


class ShopError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ShopError):
    status_code = 400
    default_message = "Invalid input"


class NotFound(ShopError):
    status_code = 404
    default_message = "Not found"


class EmptyCart(ShopError):
    status_code = 400
    default_message = "Cart is empty"


class InsufficientPoints(ShopError):
    status_code = 400
    default_message = "Insufficient points"


class StorageFailure(ShopError):
    status_code = 500
    default_message = "Storage failure"
