"""Service layer exception classes for Order Timeline.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── OrderNotFound
    ├── ValidationError
    └── MalformedOverrideData
"""


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class OrderNotFound(ServiceError):
    """Raised when an order cannot be found by ID.

    Args:
        order_id: The order ID that was not found

    Example:
        >>> raise OrderNotFound(123)
        OrderNotFound: Order with ID 123 not found
    """

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order with ID {order_id} not found")


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class MalformedOverrideData(ServiceError):
    """Raised when a stored task override map cannot be parsed.

    Never escapes the override store: readers recover by treating the map
    as empty.

    Args:
        raw_value: The stored value that failed to parse
        reason: Short description of the failure
    """

    def __init__(self, raw_value, reason: str):
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(f"Malformed task override data: {reason}")
