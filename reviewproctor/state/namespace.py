"""Namespace-bound view over a :class:`StateStore`."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from reviewproctor.state.store import StateStore

INSTALL_DATE = "install_date"
LAST_REVIEW_DATE = "last_review_date"
REFUSAL_DATE = "refusal_date"
REMINDER_DATE = "reminder_date"
USES_COUNT = "uses_count"
EVENTS_COUNT = "events_count"
APP_ID = "app_id"
AFFILIATE_CODE = "affiliate_code"
AFFILIATE_CAMPAIGN_CODE = "affiliate_campaign_code"
REVIEW_TEXT = "review_text"
APP_TITLE = "app_title"
THRESHOLD_PREFIX = "threshold."

DATE_FIELDS = (INSTALL_DATE, LAST_REVIEW_DATE, REFUSAL_DATE, REMINDER_DATE)
COUNTER_FIELDS = (USES_COUNT, EVENTS_COUNT)


class NamespacedState:
    """Expose typed field access under ``<namespace>.<field>`` keys.

    Several applications may share one store; each one gets its own
    :class:`NamespacedState` and never sees the others' fields.
    """

    def __init__(self, store: StateStore, namespace: str) -> None:
        if not namespace:
            raise ValueError("namespace must be a non-empty string")
        self._store = store
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def store(self) -> StateStore:
        return self._store

    def key(self, field: str) -> str:
        return f"{self._namespace}.{field}"

    # ------------------------------------------------------------------
    def get_int(self, field: str) -> Optional[int]:
        return self._store.get_int(self.key(field))

    def set_int(self, field: str, value: int) -> None:
        self._store.set_int(self.key(field), value)

    def get_string(self, field: str) -> Optional[str]:
        return self._store.get_string(self.key(field))

    def set_string(self, field: str, value: str) -> None:
        self._store.set_string(self.key(field), value)

    def get_timestamp(self, field: str) -> Optional[datetime]:
        return self._store.get_timestamp(self.key(field))

    def set_timestamp(self, field: str, value: datetime) -> None:
        self._store.set_timestamp(self.key(field), value)

    def remove(self, field: str) -> None:
        self._store.remove(self.key(field))

    def dates(self) -> Dict[str, Optional[datetime]]:
        return {name: self.get_timestamp(name) for name in DATE_FIELDS}

    def counters(self) -> Dict[str, int]:
        return {name: self.get_int(name) or 0 for name in COUNTER_FIELDS}
