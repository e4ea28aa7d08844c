from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from jobtracker.core.errors import ValidationError
from jobtracker.core.result import Err, Ok, Result
from jobtracker.types import ACTIVE_LABELS, INACTIVE_LABELS, StatusCategory


@dataclass(slots=True)
class PipelineConfig:
    """Labels the pipeline UI offers, per category.

    This is configuration only: applications may carry labels that are no
    longer listed here.
    """

    active: list[str] = field(default_factory=lambda: list(ACTIVE_LABELS))
    inactive: list[str] = field(default_factory=lambda: list(INACTIVE_LABELS))

    @classmethod
    def default(cls) -> PipelineConfig:
        return cls()

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> Result[PipelineConfig, ValidationError]:
        lists: dict[str, list[str]] = {}
        for category in ("active", "inactive"):
            raw = data.get(category)
            if not isinstance(raw, list):
                return Err(ValidationError(category, "must be a list of labels"))
            labels: list[str] = []
            for item in raw:
                label = str(item).strip()
                if label and label not in labels:
                    labels.append(label)
            if not labels:
                return Err(ValidationError(category, "at least one label is required"))
            lists[category] = labels
        return Ok(cls(active=lists["active"], inactive=lists["inactive"]))

    def to_data(self) -> dict[str, list[str]]:
        return {"active": list(self.active), "inactive": list(self.inactive)}

    def status_options(self) -> dict[str, list[str]]:
        """Configured labels an application can actually be moved to."""
        return {
            "active": [label for label in self.active if label in ACTIVE_LABELS],
            "inactive": [label for label in self.inactive if label in INACTIVE_LABELS],
        }

    def category_of(self, label: str) -> StatusCategory | None:
        if label in self.active:
            return "active"
        if label in self.inactive:
            return "inactive"
        return None

    def _add(self, labels: list[str], category: str, label: str) -> Result[None, ValidationError]:
        cleaned = label.strip()
        if not cleaned:
            return Err(ValidationError(category, "label must not be empty"))
        if cleaned not in labels:
            labels.append(cleaned)
        return Ok(None)

    def add_active_status(self, label: str) -> Result[None, ValidationError]:
        return self._add(self.active, "active", label)

    def add_inactive_status(self, label: str) -> Result[None, ValidationError]:
        return self._add(self.inactive, "inactive", label)

    def remove_status(self, label: str) -> Result[None, ValidationError]:
        cleaned = label.strip()
        for category, labels in (("active", self.active), ("inactive", self.inactive)):
            if cleaned not in labels:
                continue
            if len(labels) == 1:
                return Err(ValidationError(category, f"cannot remove the last {category} label"))
            labels.remove(cleaned)
            return Ok(None)
        return Ok(None)
