"""
Task override store.

A sparse map of manual completion values keyed by task id. Absence of a key
means "defer to automatic inference". An override equal to the automatic
value is still an override and is stored as such; only clear() removes it.

The map is persisted as a compact JSON object of booleans. An empty map
serializes to None so no vacuous state is stored, and a stored value that
cannot be parsed reads back as an empty map.
"""

import json
import logging
from typing import Dict, Iterator, Mapping, Optional

from src.services.exceptions import MalformedOverrideData
from src.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


class TaskOverrides:
    """Sparse map of task id -> manual completion value."""

    def __init__(self, values: Optional[Mapping[str, bool]] = None):
        self._values: Dict[str, bool] = {}
        for task_id, value in (values or {}).items():
            self.set(task_id, value)

    def get(self, task_id: str) -> Optional[bool]:
        """Manual value for a task, None when no override exists."""
        return self._values.get(task_id)

    def set(self, task_id: str, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError(f"Override for '{task_id}' must be a bool, got {type(value).__name__}")
        self._values[task_id] = value

    def clear(self, task_id: str) -> None:
        self._values.pop(task_id, None)

    def apply(self, task_id: str, value: Optional[bool]) -> "TaskOverrides":
        """Set the override, or clear it when value is None. Returns self."""
        if value is None:
            self.clear(task_id)
        else:
            self.set(task_id, value)
        return self

    def copy(self) -> "TaskOverrides":
        return TaskOverrides(self._values)

    def to_dict(self) -> Dict[str, bool]:
        return dict(self._values)

    def serialize(self) -> Optional[str]:
        """Compact JSON for storage, None when the map is empty."""
        if not self._values:
            return None
        return json.dumps(self._values, separators=(",", ":"), ensure_ascii=False)

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other) -> bool:
        if isinstance(other, TaskOverrides):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"TaskOverrides({self._values!r})"


def _decode_overrides(raw: str) -> Dict[str, bool]:
    """Decode a stored override map, keeping only boolean values.

    Raises:
        MalformedOverrideData: If the value is not a JSON object
    """
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise MalformedOverrideData(raw, f"invalid JSON ({e})") from e

    if not isinstance(parsed, dict):
        raise MalformedOverrideData(raw, f"expected an object, got {type(parsed).__name__}")

    return {
        str(task_id): value for task_id, value in parsed.items() if isinstance(value, bool)
    }


def parse_task_overrides(raw: Optional[str]) -> TaskOverrides:
    """Read a stored override map.

    Missing and malformed values both read as an empty map; malformed data
    is logged and never raised.
    """
    if not raw:
        return TaskOverrides()

    try:
        return TaskOverrides(_decode_overrides(raw))
    except MalformedOverrideData as e:
        log_operation(
            logger,
            operation="parse_task_overrides",
            outcome="malformed_overrides",
            level=logging.WARNING,
            reason=e.reason,
        )
        return TaskOverrides()


def set_override(raw: Optional[str], task_id: str, value: Optional[bool]) -> Optional[str]:
    """Apply one override change to a stored map and return the new stored value."""
    return parse_task_overrides(raw).apply(task_id, value).serialize()
