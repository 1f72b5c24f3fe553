"""
Plain data records the timeline engine consumes and produces.

The engine never touches the database: the order service copies the few
fields it needs into an OrderSnapshot, and writes back whatever the
transition operator returns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from src.models.enums import OrderType


@dataclass(frozen=True)
class DocumentRef:
    """Read-only view of one document issued for an order.

    Attributes:
        kind: Document kind value (e.g. "proforma", "final_invoice")
        cancelled: True when the document was cancelled or voided
        pdf_url: Reference to the rendered artifact, if any
        draft: True while the document is still a draft
    """

    kind: str
    cancelled: bool = False
    pdf_url: Optional[str] = None
    draft: bool = False

    @property
    def has_artifact(self) -> bool:
        return bool(self.pdf_url)

    @property
    def is_issued(self) -> bool:
        return not self.cancelled and not self.draft


@dataclass(frozen=True)
class Actor:
    """Identity of the person performing a change."""

    display_name: str
    email: Optional[str] = None

    @property
    def label(self) -> str:
        """Name shown in the note log; falls back to e-mail when the name is blank."""
        name = (self.display_name or "").strip()
        if name:
            return name
        return (self.email or "").strip()


@dataclass(frozen=True)
class OrderSnapshot:
    """Immutable snapshot of the order fields the engine works with.

    Attributes:
        status: Current status string (raw, possibly legacy)
        note_log: Encoded note log text
        created_at: Order creation time
        task_overrides: Sparse map of manual checklist values
        documents: Documents issued for the order
        requires_review: Whether the order still awaits acknowledgement
        order_type: Production or sample order
    """

    status: str
    note_log: str = ""
    created_at: Optional[datetime] = None
    task_overrides: Dict[str, bool] = field(default_factory=dict)
    documents: Tuple[DocumentRef, ...] = ()
    requires_review: bool = False
    order_type: OrderType = OrderType.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "status": self.status,
            "note_log": self.note_log,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "task_overrides": dict(self.task_overrides),
            "documents": [
                {
                    "kind": doc.kind,
                    "cancelled": doc.cancelled,
                    "draft": doc.draft,
                    "pdf_url": doc.pdf_url,
                }
                for doc in self.documents
            ],
            "requires_review": self.requires_review,
            "order_type": OrderType(self.order_type).value,
        }
