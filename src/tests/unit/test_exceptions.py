"""Unit tests for exception hierarchy.

Validates that all exceptions inherit from ServiceError and carry the
attributes callers rely on.
"""

import inspect

import pytest

from src.services import exceptions as exc_module
from src.services.exceptions import (
    MalformedOverrideData,
    OrderNotFound,
    ServiceError,
    ValidationError,
)


def get_all_exception_classes():
    """Discover all exception classes in the exceptions module."""
    return [
        (name, obj)
        for name, obj in inspect.getmembers(exc_module, inspect.isclass)
        if issubclass(obj, Exception) and obj.__module__ == exc_module.__name__
    ]


@pytest.mark.parametrize("name,cls", get_all_exception_classes())
def test_inherits_from_service_error(name, cls):
    """Every service exception derives from ServiceError."""
    assert issubclass(cls, ServiceError)


def test_order_not_found_carries_id():
    error = OrderNotFound(42)
    assert error.order_id == 42
    assert "42" in str(error)


def test_validation_error_joins_messages():
    error = ValidationError(["first problem", "second problem"])
    assert error.errors == ["first problem", "second problem"]
    assert str(error) == "Validation failed: first problem; second problem"


def test_malformed_override_data():
    error = MalformedOverrideData("{x", "invalid JSON")
    assert error.raw_value == "{x"
    assert error.reason == "invalid JSON"
    assert "invalid JSON" in str(error)
