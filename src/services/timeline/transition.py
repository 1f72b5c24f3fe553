"""
Status transition operator.

The only code path that changes an order's status or appends to its note
log. Works on snapshots: it returns the updated snapshot and whether anything
changed, and leaves persisting it to the caller.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from .note_log import clean_note_text, encode_note_log
from .snapshot import Actor, OrderSnapshot
from .stage_catalog import DEFAULT_CATALOG, StageCatalog


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a transition.

    Attributes:
        snapshot: Updated snapshot (the input snapshot itself when unchanged)
        changed: False when the transition was a no-op and nothing must be written
        status: Normalized target status
        note_appended: Whether a note line was added to the log
        review_cleared: Whether the review flag was cleared
    """

    snapshot: OrderSnapshot
    changed: bool
    status: str
    note_appended: bool = False
    review_cleared: bool = False


def transition(
    snapshot: OrderSnapshot,
    target_status: str,
    note_text: Optional[str],
    actor: Actor,
    now: datetime,
    catalog: StageCatalog = DEFAULT_CATALOG,
    acknowledge_review: bool = False,
) -> TransitionResult:
    """Move an order to a status, optionally recording a note.

    Rules:
        - The target status is normalized against the catalog.
        - The review flag is cleared when the target is anything other than
          the first actionable stage, or when acknowledge_review is set.
        - Same status, no note and no review change is a no-op: the input
          snapshot is returned with changed=False.
        - Otherwise the note (if any) is appended and status and review flag
          are updated together.

    Args:
        snapshot: Current order state
        target_status: Requested status (raw; may be legacy)
        note_text: Optional note; blank counts as absent
        actor: Person performing the change
        now: Time of the change
        catalog: Stage catalog
        acknowledge_review: Clear the review flag regardless of target

    Returns:
        TransitionResult
    """
    target = catalog.normalize(target_status)
    current = catalog.normalize(snapshot.status)
    note = clean_note_text(note_text)

    clears_review = snapshot.requires_review and (
        acknowledge_review or target != catalog.default_key
    )

    if target == current and note is None and not clears_review:
        return TransitionResult(snapshot=snapshot, changed=False, status=target)

    updated = replace(
        snapshot,
        status=target,
        note_log=encode_note_log(snapshot.note_log, target, note, actor, now),
        requires_review=snapshot.requires_review and not clears_review,
    )
    return TransitionResult(
        snapshot=updated,
        changed=True,
        status=target,
        note_appended=note is not None,
        review_cleared=clears_review,
    )
