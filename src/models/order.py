"""
Order model for manually managed customer orders.

The timeline engine treats an order as a snapshot of a few fields:
- status: free-form current status string (may hold legacy values)
- notes: append-only note log, one encoded entry per line
- timeline_task_overrides: sparse JSON map of manual checklist values
- requires_review: set for orders imported from external channels
"""

from sqlalchemy import (
    Boolean,
    Column,
    Enum as SQLEnum,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import OrderType


class Order(BaseModel):
    """
    Order model.

    Attributes:
        reference: Human-facing order number (unique)
        customer_name: Billing name of the customer
        channel: Sales channel the order came from
        status: Current lifecycle status string
        notes: Encoded note log (newline separated)
        timeline_task_overrides: Serialized override map, NULL when empty
        requires_review: Whether staff still has to acknowledge the order
        order_type: Production or sample order
        documents: Documents issued for this order
    """

    __tablename__ = "manual_orders"

    reference = Column(String(100), nullable=False, unique=True)
    customer_name = Column(String(200), nullable=True)
    channel = Column(String(100), nullable=True)

    status = Column(String(200), nullable=False)
    notes = Column(Text, nullable=True)
    timeline_task_overrides = Column(Text, nullable=True)
    requires_review = Column(Boolean, nullable=False, default=False)
    order_type = Column(
        SQLEnum(OrderType), nullable=False, default=OrderType.PRODUCTION
    )

    documents = relationship(
        "OrderDocument",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderDocument.id",
    )

    __table_args__ = (
        Index("idx_manual_orders_created_at", "created_at"),
        Index("idx_manual_orders_requires_review", "requires_review"),
        Index("idx_manual_orders_type", "order_type"),
    )

    def __repr__(self) -> str:
        """String representation of order."""
        return f"Order(id={self.id}, reference='{self.reference}', status='{self.status}')"
