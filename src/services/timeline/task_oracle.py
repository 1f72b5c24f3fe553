"""
Task-completion oracle.

Infers whether a checklist item is done from observable facts only: how far
the order has progressed and which documents exist for it. Rules are plain
data evaluated top to bottom; the first rule matching the stage key and the
task label decides. A label no rule matches falls through to the fallback:
the task is done once its stage is completed.

Label matching is keyword based on lower-cased labels. Labels are prose, so
renaming a task in the catalog may require updating its rule keywords.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .snapshot import DocumentRef
from .stage_catalog import (
    DEFAULT_CATALOG,
    STAGE_DELIVERED,
    STAGE_FULFILLMENT,
    STAGE_HANDOVER,
    STAGE_VERIFICATION,
    StageCatalog,
)


def normalize_label(label: str) -> str:
    """Lower-case a label and collapse its whitespace."""
    return " ".join(label.lower().split())


@dataclass(frozen=True)
class TaskContext:
    """Facts a rule may inspect."""

    stage_index: int
    current_stage_index: int
    documents: Tuple[DocumentRef, ...]
    catalog: StageCatalog

    @property
    def stage_completed(self) -> bool:
        return self.stage_index < self.current_stage_index


@dataclass(frozen=True)
class StageReachedRule:
    """Task is done once the order is at or past a named stage."""

    stage_key: str
    keywords: Tuple[str, ...]
    reached_stage_key: str

    kind = "stage_reached"

    def matches(self, stage_key: str, label: str) -> bool:
        return stage_key == self.stage_key and all(k in label for k in self.keywords)

    def evaluate(self, context: TaskContext) -> bool:
        target = context.catalog.stage_index(self.reached_stage_key)
        if target is None:
            return context.stage_completed
        return context.current_stage_index >= target


@dataclass(frozen=True)
class DocumentRule:
    """Task is done once an issued document of a kind exists.

    Draft and cancelled documents do not count: a draft final invoice can
    still be discarded, so it does not complete its task. With
    require_artifact the document must also have a rendered PDF.
    """

    stage_key: str
    keywords: Tuple[str, ...]
    document_kind: str
    require_artifact: bool = False

    kind = "document"

    def matches(self, stage_key: str, label: str) -> bool:
        return stage_key == self.stage_key and all(k in label for k in self.keywords)

    def evaluate(self, context: TaskContext) -> bool:
        return any(
            doc.kind == self.document_kind
            and doc.is_issued
            and (doc.has_artifact or not self.require_artifact)
            for doc in context.documents
        )


@dataclass(frozen=True)
class StageCompletedRule:
    """Fallback: task is done iff its stage is completed."""

    kind = "stage_completed"

    def matches(self, stage_key: str, label: str) -> bool:
        return True

    def evaluate(self, context: TaskContext) -> bool:
        return context.stage_completed


FALLBACK_RULE = StageCompletedRule()

DEFAULT_TASK_RULES = (
    DocumentRule(STAGE_VERIFICATION, ("proforma wystawiona",), "proforma", require_artifact=True),
    StageReachedRule(STAGE_VERIFICATION, ("proforma opłacona",), STAGE_FULFILLMENT),
    StageReachedRule(STAGE_VERIFICATION, ("tpay",), STAGE_FULFILLMENT),
    StageReachedRule(STAGE_FULFILLMENT, ("przyjęte przez magazyn",), STAGE_FULFILLMENT),
    StageReachedRule(STAGE_FULFILLMENT, ("wysłan",), STAGE_HANDOVER),
    DocumentRule(STAGE_DELIVERED, ("faktur", "końcow"), "final_invoice"),
)


def select_rule(stage_key: str, task_label: str, rules: Sequence = DEFAULT_TASK_RULES):
    """Return the rule that decides a task (the fallback when nothing matches)."""
    label = normalize_label(task_label)
    for rule in rules:
        if rule.matches(stage_key, label):
            return rule
    return FALLBACK_RULE


def is_auto_completed(
    stage_key: str,
    task_label: str,
    current_stage_index: int,
    documents: Iterable[DocumentRef] = (),
    catalog: StageCatalog = DEFAULT_CATALOG,
    rules: Optional[Sequence] = None,
) -> bool:
    """Infer a checklist item's completion from observable facts.

    Args:
        stage_key: Key of the stage owning the task
        task_label: Operator-facing task label
        current_stage_index: Catalog position of the order's current stage
        documents: Documents issued for the order
        catalog: Stage catalog the indices refer to
        rules: Rule table (default rules when None)

    Returns:
        True if the facts show the task is done. Never raises; a stage key
        not present in the catalog yields False.
    """
    stage_index = catalog.stage_index(stage_key)
    if stage_index is None:
        return False

    context = TaskContext(
        stage_index=stage_index,
        current_stage_index=current_stage_index,
        documents=tuple(documents),
        catalog=catalog,
    )
    rule = select_rule(stage_key, task_label, DEFAULT_TASK_RULES if rules is None else rules)
    return rule.evaluate(context)
