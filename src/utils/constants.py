"""
Constants for the Order Timeline application.

This module defines all system-wide constants including:
- Application metadata
- Note log encoding settings
- Timeline display defaults
"""

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Order Timeline"
APP_VERSION = "0.1.0"
DATABASE_VERSION = "1.0"
DATABASE_FILENAME = "order_timeline.db"

# ============================================================================
# Note Log Encoding
# ============================================================================

# Separates the title from the body on a single note log line
NOTE_SEPARATOR = "|"

# Mirrors the pl-PL short date/time style ("19.10.2026, 14:05")
NOTE_TIMESTAMP_FORMAT = "%d.%m.%Y, %H:%M"

# Joins the note text with the actor who entered it
NOTE_ACTOR_SEPARATOR = " — "

NOTE_DEFAULT_TITLE = "Etap dodatkowy {number}"
NOTE_DEFAULT_DESCRIPTION = "Brak dodatkowego opisu."

# ============================================================================
# Timeline Display
# ============================================================================

# Backward offset applied per stage of distance from the current stage
STAGE_TIMESTAMP_OFFSET_MINUTES = 20

DEFAULT_DB_TIMEOUT = 30

# Note log timestamps are rendered in the operators' local time
DEFAULT_DISPLAY_TIMEZONE = "Europe/Warsaw"
