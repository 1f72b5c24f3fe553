"""
Order lifecycle timeline engine.

Turns an order's status field, its note log and its sparse task overrides
into an ordered timeline with computed stage states and checklists, and
provides the idempotent status transition that keeps it consistent.

Usage:
    from src.services.timeline import (
        OrderSnapshot,
        Actor,
        build_order_timeline,
        transition,
    )

    timeline = build_order_timeline(snapshot)
    result = transition(snapshot, "Kompletacja zamówienia", "Klient zadzwonił",
                        Actor("Jan"), now)
    if result.changed:
        persist(result.snapshot)
"""

from .builder import (
    OrderTimeline,
    TaskView,
    TimelineEntry,
    build_order_timeline,
    build_tasks,
    build_timeline,
)
from .note_log import NoteLogEntry, decode_note_log, encode_note_log
from .overrides import TaskOverrides, parse_task_overrides, set_override
from .snapshot import Actor, DocumentRef, OrderSnapshot
from .stage_catalog import (
    DEFAULT_CATALOG,
    LEGACY_STATUS_ALIASES,
    Stage,
    StageCatalog,
    normalize_status,
)
from .task_oracle import (
    DEFAULT_TASK_RULES,
    DocumentRule,
    StageCompletedRule,
    StageReachedRule,
    is_auto_completed,
)
from .transition import TransitionResult, transition

__all__ = [
    # Records
    "OrderSnapshot",
    "DocumentRef",
    "Actor",
    # Stage catalog
    "Stage",
    "StageCatalog",
    "DEFAULT_CATALOG",
    "LEGACY_STATUS_ALIASES",
    "normalize_status",
    # Note log
    "NoteLogEntry",
    "decode_note_log",
    "encode_note_log",
    # Oracle
    "DEFAULT_TASK_RULES",
    "DocumentRule",
    "StageReachedRule",
    "StageCompletedRule",
    "is_auto_completed",
    # Overrides
    "TaskOverrides",
    "parse_task_overrides",
    "set_override",
    # Builder
    "TaskView",
    "TimelineEntry",
    "OrderTimeline",
    "build_tasks",
    "build_timeline",
    "build_order_timeline",
    # Transition
    "TransitionResult",
    "transition",
]
