"""Per-request collection of attempted values and field errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple


DEFAULT_MAX_ALLOWED_ERRORS = 200


@dataclass
class ModelStateEntry:
    raw_values: Tuple[Optional[str], ...] = ()
    attempted_value: Optional[str] = None
    errors: List[str] = field(default_factory=list)


class ModelState:
    """Caller-owned collector that binders report into.

    Entries keep insertion order so that the error summary lists problems in the
    order the form declares its fields.
    """

    def __init__(self, max_allowed_errors: int = DEFAULT_MAX_ALLOWED_ERRORS) -> None:
        if max_allowed_errors <= 0:
            raise ValueError("max_allowed_errors must be a positive integer")
        self.max_allowed_errors = max_allowed_errors
        self._entries: Dict[str, ModelStateEntry] = {}
        self._error_count = 0

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> List[str]:
        return list(self._entries)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def has_reached_max_errors(self) -> bool:
        return self._error_count >= self.max_allowed_errors

    @property
    def is_valid(self) -> bool:
        return self._error_count == 0

    def set_model_value(self, key: str, raw_values: Iterable[Optional[str]]) -> None:
        entry = self._entries.setdefault(key, ModelStateEntry())
        entry.raw_values = tuple(raw_values)
        entry.attempted_value = ",".join("" if value is None else value for value in entry.raw_values)

    def try_add_model_error(self, key: str, message: str) -> bool:
        if self.has_reached_max_errors:
            return False
        self._entries.setdefault(key, ModelStateEntry()).errors.append(message)
        self._error_count += 1
        return True

    def attempted_value(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        return entry.attempted_value if entry else None

    def errors_for(self, key: str) -> List[str]:
        entry = self._entries.get(key)
        return list(entry.errors) if entry else []

    def error_summary(self) -> List[Dict[str, str]]:
        """Error list in the shape the GOV.UK error summary component takes."""
        summary: List[Dict[str, str]] = []
        for key, entry in self._entries.items():
            for message in entry.errors:
                summary.append({"text": message, "href": f"#{key}"})
        return summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: {
                "attemptedValue": entry.attempted_value,
                "rawValues": list(entry.raw_values),
                "errors": list(entry.errors),
            }
            for key, entry in self._entries.items()
        }
