"""Declarative proctoring policy definitions."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol, Tuple

from reviewproctor.state import NamespacedState, ensure_utc
from reviewproctor.state.namespace import (
    APP_ID,
    EVENTS_COUNT,
    INSTALL_DATE,
    LAST_REVIEW_DATE,
    REFUSAL_DATE,
    REMINDER_DATE,
    USES_COUNT,
)
from reviewproctor.thresholds import Threshold, ThresholdSettings

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

# Fixed; not overridable through thresholds.
REFUSAL_COOLDOWN_DAYS = 91


class CheckName(str, Enum):
    """Names of the proctoring checks, declared in evaluation order."""

    REFUSAL_COOLDOWN = "refusal_cooldown"
    REMINDER_COOLDOWN = "reminder_cooldown"
    DAYS_SINCE_LAST_REVIEW = "days_since_last_review"
    DAYS_SINCE_INSTALL = "days_since_install"
    USES_MET = "uses_met"
    SIGNIFICANT_EVENTS_MET = "significant_events_met"
    APP_INFO_PRESENT = "app_info_present"

    @property
    def ordinal(self) -> int:
        return list(CheckName).index(self) + 1


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of a proctored review evaluation.

    ``reason`` names the first failing check and is ``None`` when allowed.
    """

    allowed: bool
    reason: Optional[CheckName] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: CheckName) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value if self.reason else None,
            "ordinal": self.reason.ordinal if self.reason else None,
        }


@dataclass(slots=True)
class EvaluationContext:
    """Everything a policy may look at: state, thresholds, clock and capability."""

    state: NamespacedState
    thresholds: ThresholdSettings
    now: datetime
    native_review_supported: bool

    def elapsed_days(self, field: str) -> Optional[int]:
        since = self.state.get_timestamp(field)
        if since is None:
            return None
        return elapsed_days(since, self.now)


def elapsed_days(since: datetime, now: datetime) -> int:
    """Whole 24h periods between ``since`` and ``now``, without calendar rules."""

    seconds = (ensure_utc(now) - ensure_utc(since)).total_seconds()
    return math.floor(seconds / SECONDS_PER_DAY)


class Policy(Protocol):
    """A policy inspects an :class:`EvaluationContext` and passes or fails."""

    name: CheckName

    def passes(self, context: EvaluationContext) -> bool:
        ...


@dataclass(frozen=True, slots=True)
class CooldownPolicy:
    """Pass when ``field`` was never recorded or enough days have elapsed since.

    The required number of days is either the fixed ``days`` or the current
    value of ``threshold``.
    """

    name: CheckName
    field: str
    threshold: Optional[Threshold] = None
    days: int = 0

    def passes(self, context: EvaluationContext) -> bool:
        elapsed = context.elapsed_days(self.field)
        if elapsed is None:
            return True
        required = context.thresholds.get(self.threshold) if self.threshold else self.days
        logger.debug(f"{self.name.value}: {elapsed} day(s) elapsed, {required} required")
        return elapsed >= required


@dataclass(frozen=True, slots=True)
class DaysSinceInstallPolicy:
    """Pass once enough days have elapsed since install.

    Unlike the cooldowns a missing install date fails: without it the elapsed
    install time cannot be verified.
    """

    name: CheckName = CheckName.DAYS_SINCE_INSTALL

    def passes(self, context: EvaluationContext) -> bool:
        elapsed = context.elapsed_days(INSTALL_DATE)
        if elapsed is None:
            logger.debug(f"{self.name.value}: no install date recorded")
            return False
        required = context.thresholds.get(Threshold.DAYS_SINCE_INSTALL)
        logger.debug(f"{self.name.value}: {elapsed} day(s) elapsed, {required} required")
        return elapsed >= required


@dataclass(frozen=True, slots=True)
class CounterPolicy:
    """Pass when a counter (absent counts as zero) reaches its threshold."""

    name: CheckName
    field: str
    threshold: Threshold

    def passes(self, context: EvaluationContext) -> bool:
        total = context.state.get_int(self.field) or 0
        required = context.thresholds.get(self.threshold)
        logger.debug(f"{self.name.value}: {total} recorded, {required} required")
        return total >= required


@dataclass(frozen=True, slots=True)
class AppInfoPolicy:
    """Pass when the host shows a native review surface or an app id is known.

    The fallback dialog links to the store page, which needs the app id.
    An empty app id counts as not configured, the same as an absent one.
    """

    name: CheckName = CheckName.APP_INFO_PRESENT

    def passes(self, context: EvaluationContext) -> bool:
        if context.native_review_supported:
            return True
        return bool(context.state.get_string(APP_ID))


DEFAULT_POLICIES: Tuple[Policy, ...] = (
    CooldownPolicy(CheckName.REFUSAL_COOLDOWN, REFUSAL_DATE, days=REFUSAL_COOLDOWN_DAYS),
    CooldownPolicy(CheckName.REMINDER_COOLDOWN, REMINDER_DATE, threshold=Threshold.REMINDER_DAYS),
    CooldownPolicy(
        CheckName.DAYS_SINCE_LAST_REVIEW, LAST_REVIEW_DATE, threshold=Threshold.DAYS_SINCE_LAST_REVIEW
    ),
    DaysSinceInstallPolicy(),
    CounterPolicy(CheckName.USES_MET, USES_COUNT, Threshold.USES),
    CounterPolicy(CheckName.SIGNIFICANT_EVENTS_MET, EVENTS_COUNT, Threshold.SIGNIFICANT_EVENTS),
    AppInfoPolicy(),
)
