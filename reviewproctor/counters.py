"""Usage counters incremented by the host application."""
from __future__ import annotations

import logging

from reviewproctor.state.namespace import EVENTS_COUNT, USES_COUNT, NamespacedState

logger = logging.getLogger(__name__)


class EventCounters:
    """Increment the ``uses`` and ``significant events`` counters.

    Counters start at zero when absent and only ever grow; the reset to zero
    happens in :meth:`reviewproctor.outcomes.OutcomeRecorder.accept`.
    """

    def __init__(self, state: NamespacedState) -> None:
        self._state = state

    def record_use(self, count: int = 1) -> int:
        return self._increment(USES_COUNT, count)

    def record_significant_event(self, count: int = 1) -> int:
        return self._increment(EVENTS_COUNT, count)

    @property
    def uses(self) -> int:
        return self._state.get_int(USES_COUNT) or 0

    @property
    def significant_events(self) -> int:
        return self._state.get_int(EVENTS_COUNT) or 0

    def _increment(self, field: str, count: int) -> int:
        if count < 1:
            raise ValueError("count must be at least 1")
        total = (self._state.get_int(field) or 0) + count
        self._state.set_int(field, total)
        logger.debug(f"{field} = {total}")
        return total
