"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .enums import (
    CompletionSource,
    DocumentKind,
    DocumentStatus,
    OrderType,
    TimelineState,
)
from .order import Order
from .order_document import OrderDocument

__all__ = [
    "Base",
    "BaseModel",
    # Orders
    "Order",
    "OrderDocument",
    # Enums
    "OrderType",
    "DocumentKind",
    "DocumentStatus",
    "TimelineState",
    "CompletionSource",
]
