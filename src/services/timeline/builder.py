"""
Timeline builder.

Composes the stage catalog, the order's current status and its note log into
one ordered view:

    creation entry, catalog stages in catalog order, note-log entries in log order

Each catalog stage carries its checklist, where every task's completion is
the manual override when one exists and the oracle's inference otherwise.
The builder is a pure function of its input.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

from src.models.enums import CompletionSource, TimelineState
from src.utils.constants import NOTE_DEFAULT_DESCRIPTION, STAGE_TIMESTAMP_OFFSET_MINUTES

from .note_log import decode_note_log
from .snapshot import OrderSnapshot
from .stage_catalog import DEFAULT_CATALOG, Stage, StageCatalog
from .task_oracle import is_auto_completed


@dataclass(frozen=True)
class TaskView:
    """Computed state of one checklist item.

    Attributes:
        id: Stable task id (stage slug + label slug)
        label: Operator-facing label
        completed: Effective completion (override if present, else automatic)
        auto_completed: What the oracle infers from facts
        manual_override: Stored override, None when absent
        completion_source: MANUAL when an override exists, AUTO otherwise
    """

    id: str
    label: str
    completed: bool
    auto_completed: bool
    manual_override: Optional[bool]
    completion_source: CompletionSource

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "completed": self.completed,
            "auto_completed": self.auto_completed,
            "manual_override": self.manual_override,
            "completion_source": self.completion_source.value,
        }


@dataclass(frozen=True)
class TimelineEntry:
    """One row of the timeline: a catalog stage or a note-log entry.

    stage_key is None for note-derived entries, which are always PENDING
    and have no tasks.
    """

    id: str
    title: str
    description: str
    timestamp: Optional[datetime]
    state: TimelineState
    stage_key: Optional[str]
    tasks: List[TaskView] = field(default_factory=list)

    @property
    def is_note(self) -> bool:
        return self.stage_key is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "state": self.state.value,
            "stage_key": self.stage_key,
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass(frozen=True)
class OrderTimeline:
    """Read-path result: the entries plus the raw status echoed back."""

    current_status: str
    normalized_status: str
    entries: List[TimelineEntry]

    @property
    def current_entry(self) -> Optional[TimelineEntry]:
        for entry in self.entries:
            if entry.state == TimelineState.CURRENT:
                return entry
        return None

    @property
    def stage_entries(self) -> List[TimelineEntry]:
        return [entry for entry in self.entries if not entry.is_note]

    @property
    def note_entries(self) -> List[TimelineEntry]:
        return [entry for entry in self.entries if entry.is_note]

    def find_task(self, task_id: str) -> Optional[TaskView]:
        for entry in self.entries:
            for task in entry.tasks:
                if task.id == task_id:
                    return task
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_status": self.current_status,
            "normalized_status": self.normalized_status,
            "entries": [entry.to_dict() for entry in self.entries],
        }


def _stage_state(index: int, current_index: int) -> TimelineState:
    if index == 0 or index < current_index:
        return TimelineState.COMPLETED
    if index == current_index:
        return TimelineState.CURRENT
    return TimelineState.PENDING


def _stage_timestamp(
    index: int,
    current_index: int,
    state: TimelineState,
    created_at: Optional[datetime],
    synthesize: bool,
) -> Optional[datetime]:
    if created_at is None:
        return None
    if index == 0:
        return created_at
    if state == TimelineState.PENDING or not synthesize:
        return None
    # Display hint only; real transition times are not recorded
    distance = current_index - index
    return created_at - timedelta(minutes=distance * STAGE_TIMESTAMP_OFFSET_MINUTES)


def build_tasks(
    stage: Stage,
    snapshot: OrderSnapshot,
    current_index: int,
    catalog: StageCatalog = DEFAULT_CATALOG,
    rules: Optional[Sequence] = None,
) -> List[TaskView]:
    """Build the checklist of one stage, merging oracle output with overrides."""
    overrides: Mapping[str, bool] = snapshot.task_overrides or {}
    tasks = []
    for label in stage.tasks_for(snapshot.order_type):
        task_id = stage.task_id(label)
        auto_completed = is_auto_completed(
            stage.key,
            label,
            current_index,
            snapshot.documents,
            catalog=catalog,
            rules=rules,
        )
        override = overrides.get(task_id)
        tasks.append(
            TaskView(
                id=task_id,
                label=label,
                completed=auto_completed if override is None else override,
                auto_completed=auto_completed,
                manual_override=override,
                completion_source=(
                    CompletionSource.AUTO if override is None else CompletionSource.MANUAL
                ),
            )
        )
    return tasks


def build_timeline(
    snapshot: OrderSnapshot,
    catalog: StageCatalog = DEFAULT_CATALOG,
    rules: Optional[Sequence] = None,
    synthesize_timestamps: bool = True,
) -> List[TimelineEntry]:
    """Build the ordered timeline of an order.

    Args:
        snapshot: Order fields to render
        catalog: Stage catalog (default catalog when omitted)
        rules: Task-completion rules (default rules when None)
        synthesize_timestamps: Backdate completed stages from created_at as a
            display hint. When False only the creation entry has a timestamp.

    Returns:
        Creation entry, catalog stages, then note-log entries (oldest first)
    """
    current_index = catalog.index_of(snapshot.status)

    entries = []
    for index, stage in enumerate(catalog):
        state = _stage_state(index, current_index)
        entries.append(
            TimelineEntry(
                id=f"stage-{stage.slug}",
                title=stage.title,
                description=stage.description,
                timestamp=_stage_timestamp(
                    index, current_index, state, snapshot.created_at, synthesize_timestamps
                ),
                state=state,
                stage_key=stage.key,
                tasks=build_tasks(stage, snapshot, current_index, catalog, rules),
            )
        )

    for index, note in enumerate(decode_note_log(snapshot.note_log)):
        entries.append(
            TimelineEntry(
                id=f"note-{index}",
                title=note.title,
                description=note.body or NOTE_DEFAULT_DESCRIPTION,
                timestamp=None,
                state=TimelineState.PENDING,
                stage_key=None,
            )
        )

    return entries


def build_order_timeline(
    snapshot: OrderSnapshot,
    catalog: StageCatalog = DEFAULT_CATALOG,
    rules: Optional[Sequence] = None,
    synthesize_timestamps: bool = True,
) -> OrderTimeline:
    """Build the timeline and echo the order's raw status alongside it."""
    return OrderTimeline(
        current_status=snapshot.status,
        normalized_status=catalog.normalize(snapshot.status),
        entries=build_timeline(snapshot, catalog, rules, synthesize_timestamps),
    )
