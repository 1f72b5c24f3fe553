"""
Order document model.

Documents (proformas, invoices) are issued by the invoicing collaborator;
the timeline only observes which kinds exist and whether they were cancelled.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import DocumentKind, DocumentStatus


class OrderDocument(BaseModel):
    """
    Document issued for an order.

    Attributes:
        order_id: Owning order
        kind: Document kind (proforma, advance invoice, final invoice)
        status: Document lifecycle status
        number: Document number as printed
        pdf_url: Reference to the rendered PDF, if one was generated
        issued_at: Issue date
    """

    __tablename__ = "order_documents"

    order_id = Column(
        Integer, ForeignKey("manual_orders.id", ondelete="CASCADE"), nullable=False
    )
    kind = Column(SQLEnum(DocumentKind), nullable=False)
    status = Column(SQLEnum(DocumentStatus), nullable=False, default=DocumentStatus.ISSUED)
    number = Column(String(100), nullable=True)
    pdf_url = Column(String(500), nullable=True)
    issued_at = Column(DateTime, nullable=True)

    order = relationship("Order", back_populates="documents")

    __table_args__ = (
        Index("idx_order_documents_order", "order_id"),
        Index("idx_order_documents_kind", "kind"),
    )

    @property
    def is_cancelled(self) -> bool:
        return self.status is not None and DocumentStatus(self.status).is_cancelled

    @property
    def is_draft(self) -> bool:
        return self.status is not None and DocumentStatus(self.status).is_draft

    def __repr__(self) -> str:
        """String representation of document."""
        return f"OrderDocument(id={self.id}, kind='{self.kind}', status='{self.status}')"
