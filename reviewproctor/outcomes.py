"""Record the outcome of review prompts in persisted state."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from reviewproctor.presentation.dispatcher import UserResponse
from reviewproctor.state.namespace import (
    EVENTS_COUNT,
    INSTALL_DATE,
    LAST_REVIEW_DATE,
    REFUSAL_DATE,
    REMINDER_DATE,
    USES_COUNT,
    NamespacedState,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OutcomeRecorder:
    """Update dates and counters after prompts are shown and answered."""

    def __init__(self, state: NamespacedState, clock: Optional[Clock] = None) -> None:
        self._state = state
        self._clock = clock or utc_now

    def record_install(self) -> bool:
        """Write the install date unless one exists.  Returns ``True`` when written."""

        if self._state.get_timestamp(INSTALL_DATE) is not None:
            logger.debug("install date already recorded")
            return False
        self._state.set_timestamp(INSTALL_DATE, self._clock())
        return True

    def record_review_shown(self) -> None:
        self._state.set_timestamp(LAST_REVIEW_DATE, self._clock())

    def accept(self) -> None:
        """Reset the usage conditions so the next prompt needs fresh usage."""

        self._state.set_int(EVENTS_COUNT, 0)
        self._state.set_int(USES_COUNT, 0)
        self._state.remove(REFUSAL_DATE)
        self._state.remove(REMINDER_DATE)
        self.record_review_shown()
        logger.info(f"{self._state.namespace}: review accepted")

    def decline(self) -> None:
        self._state.set_timestamp(REFUSAL_DATE, self._clock())
        logger.info(f"{self._state.namespace}: review declined")

    def defer(self) -> None:
        self._state.set_timestamp(REMINDER_DATE, self._clock())
        logger.info(f"{self._state.namespace}: review deferred")

    def handle(self, response: UserResponse) -> None:
        if response is UserResponse.ACCEPT:
            self.accept()
        elif response is UserResponse.DECLINE:
            self.decline()
        elif response is UserResponse.DEFER:
            self.defer()
        else:  # pragma: no cover - exhaustive over the enum
            raise ValueError(f"unsupported response: {response!r}")
