"""
Note log codec.

An order's history lives in a single text field: one entry per line, each
line split by a reserved separator into a title and a body. Status changes
that carry a note are appended as

    Status: <status> (<timestamp>)|<note text> — <actor>

The codec is append-only. encode_note_log() only ever adds a trailing line;
existing text is kept byte for byte. Decoding is lossy for legacy free
lines: there is no recoverable timestamp, so the timeline renders decoded
entries without one.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from src.utils.constants import NOTE_ACTOR_SEPARATOR, NOTE_DEFAULT_TITLE, NOTE_SEPARATOR
from src.utils.datetime_utils import format_note_timestamp

from .snapshot import Actor

_STATUS_MARKER = re.compile(r"^Status: (?P<label>.+) \([^()]*\)$")


@dataclass(frozen=True)
class NoteLogEntry:
    """One decoded line of the note log."""

    title: str
    body: str

    @property
    def is_status_change(self) -> bool:
        return _STATUS_MARKER.match(self.title) is not None

    @property
    def status_label(self) -> Optional[str]:
        """Status recorded by a status-change annotation, None for free notes."""
        match = _STATUS_MARKER.match(self.title)
        return match.group("label") if match else None


def decode_note_log(text: Optional[str]) -> List[NoteLogEntry]:
    """Decode a note log into its entries, oldest first.

    Blank lines are dropped. Each remaining line is split on the first
    separator; a line without one becomes a default-titled entry whose body
    is the whole line.

    Args:
        text: Encoded note log (None is treated as empty)

    Returns:
        List of NoteLogEntry in log order
    """
    if not text:
        return []

    entries = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue

        number = len(entries) + 1
        if NOTE_SEPARATOR in stripped:
            raw_title, raw_body = stripped.split(NOTE_SEPARATOR, 1)
            title = raw_title.strip() or NOTE_DEFAULT_TITLE.format(number=number)
            body = raw_body.strip()
        else:
            title = NOTE_DEFAULT_TITLE.format(number=number)
            body = stripped

        entries.append(NoteLogEntry(title=title, body=body))

    return entries


def clean_note_text(note_text: Optional[str]) -> Optional[str]:
    """Trim a note and fold it onto one line; blank notes become None."""
    if note_text is None:
        return None
    folded = " ".join(note_text.split())
    return folded or None


def format_note_line(status: str, note_text: str, actor: Actor, now: datetime) -> str:
    """Format the status-change annotation line for a note."""
    title = f"Status: {status} ({format_note_timestamp(now)})"
    actor_label = " ".join(actor.label.split())
    return f"{title}{NOTE_SEPARATOR}{note_text}{NOTE_ACTOR_SEPARATOR}{actor_label}"


def encode_note_log(
    existing: Optional[str],
    status: str,
    note_text: Optional[str],
    actor: Actor,
    now: datetime,
) -> str:
    """Append a status-change annotation to the note log.

    Args:
        existing: Current note log text
        status: Normalized status the annotation refers to
        note_text: Note entered by the actor; blank means nothing is appended
        actor: Person entering the note
        now: Time of the change

    Returns:
        The new note log text. Prior text is returned unchanged as a prefix.
    """
    existing = existing or ""
    cleaned = clean_note_text(note_text)
    if cleaned is None:
        return existing

    line = format_note_line(status, cleaned, actor, now)
    return f"{existing}\n{line}" if existing else line
