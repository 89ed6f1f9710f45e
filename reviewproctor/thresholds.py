"""Named, overridable proctoring thresholds."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional, Union

from reviewproctor.config import ThresholdDefaults
from reviewproctor.errors import UnknownThresholdError
from reviewproctor.state.namespace import THRESHOLD_PREFIX, NamespacedState

logger = logging.getLogger(__name__)


class Threshold(str, Enum):
    """Recognised threshold names.  The value doubles as the persisted field suffix."""

    SIGNIFICANT_EVENTS = "significant_events"
    USES = "uses"
    DAYS_SINCE_INSTALL = "days_since_install"
    DAYS_SINCE_LAST_REVIEW = "days_since_last_review"
    REMINDER_DAYS = "reminder_days"

    @classmethod
    def parse(cls, name: Union["Threshold", str]) -> "Threshold":
        if isinstance(name, Threshold):
            return name
        try:
            return cls(str(name).strip().lower().replace("-", "_"))
        except ValueError:
            raise UnknownThresholdError(f"unknown threshold: {name!r}") from None

    @property
    def field(self) -> str:
        return f"{THRESHOLD_PREFIX}{self.value}"


ThresholdName = Union[Threshold, str]


class ThresholdSettings:
    """Resolve thresholds from persisted overrides, falling back to defaults.

    Overrides are stored per namespace, so each embedding application tunes its
    own thresholds.  A threshold of zero or less always passes its check.
    """

    def __init__(self, state: NamespacedState, defaults: Optional[ThresholdDefaults] = None) -> None:
        self._state = state
        self._defaults = defaults or ThresholdDefaults()

    def get(self, name: ThresholdName) -> int:
        threshold = Threshold.parse(name)
        value = self._state.get_int(threshold.field)
        if value is None:
            return self._defaults.value_for(threshold.value)
        return value

    def set(self, name: ThresholdName, value: Optional[int]) -> None:
        threshold = Threshold.parse(name)
        if value is None:
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"threshold {threshold.value} must be an int, got {type(value).__name__}")
        logger.debug(f"set threshold {threshold.value} = {value}")
        self._state.set_int(threshold.field, value)

    def as_dict(self) -> Dict[str, int]:
        return {threshold.value: self.get(threshold) for threshold in Threshold}


__all__ = ["Threshold", "ThresholdName", "ThresholdSettings"]
