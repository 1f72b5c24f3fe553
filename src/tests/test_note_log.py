"""Unit tests for the note log codec.

Tests cover:
- Decoding free lines, separated lines and blank lines
- Encoding status-change annotations
- Append-only behavior of encode
"""

from datetime import datetime, timezone

import pytest

from src.services.timeline import Actor, decode_note_log, encode_note_log
from src.services.timeline.note_log import NoteLogEntry, clean_note_text
from src.utils.config import reset_config

NOW = datetime(2026, 10, 19, 14, 5)


class TestDecode:
    """Tests for decode_note_log()."""

    @pytest.mark.parametrize("text", [None, "", "\n\n", "   \n  "])
    def test_empty_log(self, text):
        assert decode_note_log(text) == []

    def test_separated_line(self):
        entries = decode_note_log("Kontakt|Klient prosi o fakturę")
        assert entries == [NoteLogEntry(title="Kontakt", body="Klient prosi o fakturę")]

    def test_free_line_gets_default_title(self):
        entries = decode_note_log("Dzwonić po 16")
        assert entries == [NoteLogEntry(title="Etap dodatkowy 1", body="Dzwonić po 16")]

    def test_default_title_uses_position(self):
        entries = decode_note_log("A|first\n\nfree line")
        assert entries[1].title == "Etap dodatkowy 2"

    def test_blank_lines_dropped(self):
        entries = decode_note_log("one|1\n\n   \ntwo|2\n")
        assert [entry.title for entry in entries] == ["one", "two"]

    def test_split_on_first_separator_only(self):
        entries = decode_note_log("Title|body with | pipe")
        assert entries[0].body == "body with | pipe"

    def test_empty_title_gets_default(self):
        entries = decode_note_log("|only body")
        assert entries[0].title == "Etap dodatkowy 1"
        assert entries[0].body == "only body"

    def test_status_annotation_is_recognized(self):
        entry = decode_note_log("Status: Kompletacja zamówienia (19.10.2026, 14:05)|Ok — Jan")[0]
        assert entry.is_status_change
        assert entry.status_label == "Kompletacja zamówienia"

    def test_free_note_is_not_status_annotation(self):
        entry = decode_note_log("Kontakt|Ok")[0]
        assert not entry.is_status_change
        assert entry.status_label is None

    def test_decoding_is_repeatable(self):
        text = "a|1\nfree\nStatus: X (01.01.2026, 10:00)|n — Jan"
        assert decode_note_log(text) == decode_note_log(text)


class TestEncode:
    """Tests for encode_note_log()."""

    def test_first_line(self, actor):
        text = encode_note_log("", "Kompletacja zamówienia", "Klient zadzwonił", actor, NOW)
        assert text == "Status: Kompletacja zamówienia (19.10.2026, 14:05)|Klient zadzwonił — Jan"

    def test_appends_after_existing(self, actor):
        existing = "Kontakt|Ok"
        text = encode_note_log(existing, "B", "note", actor, NOW)
        assert text.startswith(existing + "\n")
        assert text.count("\n") == 1

    def test_existing_text_is_kept_verbatim(self, actor):
        existing = "  odd spacing |x\n\nfree"
        text = encode_note_log(existing, "B", "note", actor, NOW)
        assert text[: len(existing)] == existing

    @pytest.mark.parametrize("note", [None, "", "   ", "\n"])
    def test_no_note_appends_nothing(self, actor, note):
        assert encode_note_log("Kontakt|Ok", "B", note, actor, NOW) == "Kontakt|Ok"

    def test_aware_now_rendered_in_local_time(self, actor, monkeypatch):
        """A UTC clock reading is written in the operators' timezone."""
        monkeypatch.delenv("ORDER_TIMELINE_TIMEZONE", raising=False)
        reset_config()
        try:
            utc_now = datetime(2026, 10, 19, 12, 5, tzinfo=timezone.utc)
            text = encode_note_log("", "B", "note", actor, utc_now)
        finally:
            reset_config()
        assert text == "Status: B (19.10.2026, 14:05)|note — Jan"

    def test_multiline_note_folded_to_one_line(self, actor):
        text = encode_note_log("", "B", "line one\nline two", actor, NOW)
        assert "\n" not in text
        assert "line one line two" in text

    def test_actor_falls_back_to_email(self):
        text = encode_note_log("", "B", "note", Actor(display_name="  ", email="ops@example.com"), NOW)
        assert text.endswith("note — ops@example.com")

    def test_round_trip_adds_exactly_one_entry(self, actor):
        existing = "Kontakt|Ok\nfree line\n\n|body"
        before = decode_note_log(existing)
        after = decode_note_log(encode_note_log(existing, "B", "Klient zadzwonił", actor, NOW))

        assert len(after) == len(before) + 1
        assert after[: len(before)] == before
        assert after[-1].title == "Status: B (19.10.2026, 14:05)"
        assert after[-1].body == "Klient zadzwonił — Jan"

    def test_round_trip_without_note(self, actor):
        existing = "Kontakt|Ok"
        assert decode_note_log(encode_note_log(existing, "B", None, actor, NOW)) == decode_note_log(
            existing
        )


class TestCleanNoteText:
    def test_trims_and_folds(self):
        assert clean_note_text("  a \n b  ") == "a b"

    def test_blank_is_none(self):
        assert clean_note_text(" \t ") is None
