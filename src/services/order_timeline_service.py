"""Order timeline service.

Storage boundary of the timeline engine: loads an order into an
OrderSnapshot, runs the pure engine, and persists whatever it returns.

Session Management Pattern:
- All public functions accept session=None parameter
- If session provided, use it directly
- If session is None, create a new session via session_scope()

Only update_order_status() and confirm_order() write status and note log,
both through the transition operator. set_task_override() is the only
writer of the override map.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from src.models.enums import DocumentKind, DocumentStatus, OrderType
from src.models.order import Order
from src.models.order_document import OrderDocument
from src.services.database import session_scope
from src.services.exceptions import OrderNotFound, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.timeline import (
    DEFAULT_CATALOG,
    Actor,
    DocumentRef,
    OrderSnapshot,
    OrderTimeline,
    StageCatalog,
    TransitionResult,
    build_order_timeline,
    parse_task_overrides,
    transition,
)
from src.utils.config import get_config
from src.utils.datetime_utils import utc_now

logger = get_service_logger(__name__)


def _get_order_or_raise(order_id: int, session: Session) -> Order:
    """Get order by ID or raise OrderNotFound.

    Transaction boundary: Inherits session from caller.
    """
    order = session.get(Order, order_id)
    if order is None:
        raise OrderNotFound(order_id)
    return order


def _document_ref(document: OrderDocument) -> DocumentRef:
    kind = document.kind.value if isinstance(document.kind, DocumentKind) else str(document.kind)
    return DocumentRef(
        kind=kind,
        cancelled=document.is_cancelled,
        pdf_url=document.pdf_url,
        draft=document.is_draft,
    )


def snapshot_from_order(order: Order) -> OrderSnapshot:
    """Copy the fields the engine needs out of an ORM order."""
    return OrderSnapshot(
        status=order.status,
        note_log=order.notes or "",
        created_at=order.created_at,
        task_overrides=parse_task_overrides(order.timeline_task_overrides).to_dict(),
        documents=tuple(_document_ref(document) for document in order.documents),
        requires_review=bool(order.requires_review),
        order_type=order.order_type or OrderType.PRODUCTION,
    )


def _persist_transition(order: Order, result: TransitionResult, now: datetime) -> None:
    """Write status, note log and review flag in one update."""
    order.status = result.snapshot.status
    order.notes = result.snapshot.note_log or None
    order.requires_review = result.snapshot.requires_review
    order.updated_at = now


# =============================================================================
# Orders and documents
# =============================================================================


def _create_order_impl(
    reference: str,
    session: Session,
    customer_name: Optional[str],
    channel: Optional[str],
    status: Optional[str],
    order_type: OrderType,
    requires_review: bool,
    catalog: StageCatalog,
) -> Order:
    errors = []
    if not reference or not reference.strip():
        errors.append("Order reference is required")
    elif session.query(Order).filter(Order.reference == reference.strip()).first() is not None:
        errors.append(f"Order reference '{reference.strip()}' already exists")
    if errors:
        raise ValidationError(errors)

    order = Order(
        reference=reference.strip(),
        customer_name=customer_name,
        channel=channel,
        status=catalog.normalize(status) if status is not None else catalog.default_key,
        order_type=order_type,
        requires_review=requires_review,
    )
    session.add(order)
    session.flush()

    log_operation(
        logger,
        operation="create_order",
        outcome="success",
        order_id=order.id,
        reference=order.reference,
    )
    return order


def create_order(
    reference: str,
    customer_name: Optional[str] = None,
    channel: Optional[str] = None,
    status: Optional[str] = None,
    order_type: OrderType = OrderType.PRODUCTION,
    requires_review: bool = False,
    catalog: StageCatalog = DEFAULT_CATALOG,
    session: Session = None,
) -> Order:
    """Create an order.

    Transaction boundary: Single-step write.

    Args:
        reference: Unique order number
        customer_name: Billing name
        channel: Sales channel
        status: Initial status, normalized; first actionable stage when None
        order_type: Production or sample order
        requires_review: Whether staff must acknowledge the order
        catalog: Stage catalog used to normalize the status
        session: Optional session for transaction sharing

    Returns:
        Created Order

    Raises:
        ValidationError: If the reference is blank or already used
    """
    if session is not None:
        return _create_order_impl(
            reference, session, customer_name, channel, status, order_type, requires_review, catalog
        )

    with session_scope() as session:
        return _create_order_impl(
            reference, session, customer_name, channel, status, order_type, requires_review, catalog
        )


def get_order(order_id: int, session: Session = None) -> Order:
    """Get an order by ID.

    Raises:
        OrderNotFound: If the order does not exist
    """
    if session is not None:
        return _get_order_or_raise(order_id, session)

    with session_scope() as session:
        return _get_order_or_raise(order_id, session)


def _add_order_document_impl(
    order_id: int,
    kind: DocumentKind,
    session: Session,
    status: DocumentStatus,
    number: Optional[str],
    pdf_url: Optional[str],
) -> OrderDocument:
    order = _get_order_or_raise(order_id, session)
    document = OrderDocument(
        kind=DocumentKind(kind),
        status=DocumentStatus(status),
        number=number,
        pdf_url=pdf_url,
        issued_at=utc_now(),
    )
    order.documents.append(document)
    session.flush()
    return document


def add_order_document(
    order_id: int,
    kind: DocumentKind,
    status: DocumentStatus = DocumentStatus.ISSUED,
    number: Optional[str] = None,
    pdf_url: Optional[str] = None,
    session: Session = None,
) -> OrderDocument:
    """Record a document issued for an order.

    Stands in for the invoicing collaborator; the timeline only observes the
    documents.

    Raises:
        OrderNotFound: If the order does not exist
    """
    if session is not None:
        return _add_order_document_impl(order_id, kind, session, status, number, pdf_url)

    with session_scope() as session:
        return _add_order_document_impl(order_id, kind, session, status, number, pdf_url)


# =============================================================================
# Read path
# =============================================================================


def get_order_snapshot(order_id: int, session: Session = None) -> OrderSnapshot:
    """Load an order as an engine snapshot.

    Transaction boundary: Read-only operation.

    Raises:
        OrderNotFound: If the order does not exist
    """
    if session is not None:
        return snapshot_from_order(_get_order_or_raise(order_id, session))

    with session_scope() as session:
        return snapshot_from_order(_get_order_or_raise(order_id, session))


def get_order_timeline(
    order_id: int,
    catalog: StageCatalog = DEFAULT_CATALOG,
    synthesize_timestamps: Optional[bool] = None,
    session: Session = None,
) -> OrderTimeline:
    """Build the timeline of an order.

    Transaction boundary: Read-only operation.

    Args:
        order_id: Order to render
        catalog: Stage catalog
        synthesize_timestamps: Backdate completed stages; defaults to the
            synthesize_stage_timestamps configuration flag
        session: Optional session for transaction sharing

    Returns:
        OrderTimeline with entries and the raw status

    Raises:
        OrderNotFound: If the order does not exist
    """
    if synthesize_timestamps is None:
        synthesize_timestamps = get_config().synthesize_stage_timestamps

    snapshot = get_order_snapshot(order_id, session=session)
    return build_order_timeline(
        snapshot, catalog=catalog, synthesize_timestamps=synthesize_timestamps
    )


def list_orders(requires_review: Optional[bool] = None, session: Session = None) -> List[Order]:
    """List orders, newest first, optionally filtered by the review flag."""

    def _query(session: Session) -> List[Order]:
        query = session.query(Order)
        if requires_review is not None:
            query = query.filter(Order.requires_review == requires_review)
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    if session is not None:
        return _query(session)

    with session_scope() as session:
        return _query(session)


# =============================================================================
# Write path
# =============================================================================


def _update_order_status_impl(
    order_id: int,
    target_status: str,
    actor: Actor,
    note: Optional[str],
    now: datetime,
    session: Session,
    catalog: StageCatalog,
    acknowledge_review: bool = False,
) -> Order:
    try:
        order = _get_order_or_raise(order_id, session)
    except OrderNotFound:
        log_operation(
            logger,
            operation="update_order_status",
            outcome="not_found",
            level=logging.WARNING,
            order_id=order_id,
        )
        raise

    result = transition(
        snapshot_from_order(order),
        target_status,
        note,
        actor,
        now,
        catalog=catalog,
        acknowledge_review=acknowledge_review,
    )

    if not result.changed:
        log_operation(
            logger,
            operation="update_order_status",
            outcome="no_change",
            level=logging.DEBUG,
            order_id=order_id,
            status=result.status,
        )
        return order

    _persist_transition(order, result, now)
    session.flush()

    log_operation(
        logger,
        operation="update_order_status",
        outcome="success",
        order_id=order_id,
        status=result.status,
        note_appended=result.note_appended,
        review_cleared=result.review_cleared,
        actor=actor.label,
    )
    return order


def update_order_status(
    order_id: int,
    target_status: str,
    actor: Actor,
    note: Optional[str] = None,
    now: Optional[datetime] = None,
    catalog: StageCatalog = DEFAULT_CATALOG,
    session: Session = None,
) -> Order:
    """Change an order's status and/or append a note.

    Transaction boundary: Single read-modify-write. The note line, status
    and review flag are written together or not at all. A transition that
    would change nothing performs no write.

    Args:
        order_id: Order to update
        target_status: Requested status (normalized against the catalog)
        actor: Person performing the change
        note: Optional note to record with the change
        now: Time of the change (defaults to current UTC time)
        catalog: Stage catalog
        session: Optional session for transaction sharing

    Returns:
        The (possibly unchanged) Order

    Raises:
        OrderNotFound: If the order does not exist
    """
    if now is None:
        now = utc_now()

    if session is not None:
        return _update_order_status_impl(
            order_id, target_status, actor, note, now, session, catalog
        )

    with session_scope() as session:
        return _update_order_status_impl(
            order_id, target_status, actor, note, now, session, catalog
        )


def _confirm_order_impl(
    order_id: int,
    actor: Actor,
    order_type: OrderType,
    now: datetime,
    session: Session,
    catalog: StageCatalog,
) -> Order:
    order = _get_order_or_raise(order_id, session)
    type_changed = order.order_type != order_type
    order.order_type = order_type
    if type_changed:
        order.updated_at = now
    order = _update_order_status_impl(
        order_id,
        catalog.default_key,
        actor,
        None,
        now,
        session,
        catalog,
        acknowledge_review=True,
    )
    session.flush()

    log_operation(
        logger,
        operation="confirm_order",
        outcome="success",
        order_id=order_id,
        order_type=OrderType(order_type).value,
        actor=actor.label,
    )
    return order


def confirm_order(
    order_id: int,
    actor: Actor,
    order_type: OrderType = OrderType.PRODUCTION,
    now: Optional[datetime] = None,
    catalog: StageCatalog = DEFAULT_CATALOG,
    session: Session = None,
) -> Order:
    """Acknowledge an order awaiting review.

    Transaction boundary: Multi-step operation (atomic).
    Steps executed atomically:
        1. Set the order type
        2. Move the order to the first actionable stage, clearing the review flag

    Raises:
        OrderNotFound: If the order does not exist
    """
    if now is None:
        now = utc_now()

    if session is not None:
        return _confirm_order_impl(order_id, actor, order_type, now, session, catalog)

    with session_scope() as session:
        return _confirm_order_impl(order_id, actor, order_type, now, session, catalog)


def _set_task_override_impl(
    order_id: int,
    task_id: str,
    completed: Optional[bool],
    session: Session,
    catalog: StageCatalog,
) -> Dict[str, bool]:
    if not task_id or not task_id.strip():
        raise ValidationError(["Task id is required"])

    order = _get_order_or_raise(order_id, session)
    # Clearing stays allowed so keys left behind by an order type change can be removed
    if completed is not None:
        known_ids = catalog.task_ids(OrderType(order.order_type or OrderType.PRODUCTION))
        if task_id not in known_ids:
            raise ValidationError([f"Unknown task id '{task_id}'"])

    overrides = parse_task_overrides(order.timeline_task_overrides)
    overrides.apply(task_id, completed)

    order.timeline_task_overrides = overrides.serialize()
    order.updated_at = utc_now()
    session.flush()

    log_operation(
        logger,
        operation="set_task_override",
        outcome="cleared" if completed is None else "success",
        order_id=order_id,
        task_id=task_id,
        completed=completed,
    )
    return overrides.to_dict()


def set_task_override(
    order_id: int,
    task_id: str,
    completed: Optional[bool],
    catalog: StageCatalog = DEFAULT_CATALOG,
    session: Session = None,
) -> Dict[str, bool]:
    """Set or clear a manual completion value for a checklist item.

    Transaction boundary: Single read-modify-write of the override map.

    Args:
        order_id: Order owning the task
        task_id: Stable task id from the timeline
        completed: Manual value, or None to return to automatic tracking
        catalog: Stage catalog the task id must belong to when setting
        session: Optional session for transaction sharing

    Returns:
        The updated override map (empty when nothing is overridden; it is
        then stored as NULL)

    Raises:
        ValidationError: If task_id is blank, or is not a checklist item of
            the order's type when setting a value
        OrderNotFound: If the order does not exist
    """
    if session is not None:
        return _set_task_override_impl(order_id, task_id, completed, session, catalog)

    with session_scope() as session:
        return _set_task_override_impl(order_id, task_id, completed, session, catalog)
