"""
Enumerations for order lifecycle tracking.

This module contains enums used across order models and the timeline engine:
- OrderType: Production order vs. sample order
- DocumentKind: Kinds of financial documents issued for an order
- DocumentStatus: Lifecycle of an issued document
- TimelineState: Computed state of a timeline entry
- CompletionSource: Where a checklist item's completion value came from
"""

from enum import Enum


class OrderType(str, Enum):
    """
    Order type.

    Values:
        PRODUCTION: Regular order paid against a proforma invoice
        SAMPLE: Sample order paid online (no proforma is issued)
    """

    PRODUCTION = "production"
    SAMPLE = "sample"


class DocumentKind(str, Enum):
    """Kinds of documents the invoicing collaborator issues for an order."""

    PROFORMA = "proforma"
    ADVANCE_INVOICE = "advance_invoice"
    FINAL_INVOICE = "final_invoice"


class DocumentStatus(str, Enum):
    """
    Document lifecycle status.

    DRAFT documents are not issued yet; CANCELLED and VOIDED documents no
    longer count as issued.
    """

    DRAFT = "draft"
    ISSUED = "issued"
    CANCELLED = "cancelled"
    VOIDED = "voided"
    CORRECTED = "corrected"

    @property
    def is_cancelled(self) -> bool:
        return self in (DocumentStatus.CANCELLED, DocumentStatus.VOIDED)

    @property
    def is_draft(self) -> bool:
        return self == DocumentStatus.DRAFT


class TimelineState(str, Enum):
    """
    Computed state of a timeline entry.

    Values:
        COMPLETED: Stage lies before the current stage
        CURRENT: Stage matching the normalized order status
        PENDING: Stage not reached yet (also every note-derived entry)
    """

    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


class CompletionSource(str, Enum):
    """Origin of a checklist item's completion value."""

    AUTO = "auto"
    MANUAL = "manual"
