"""Configuration schema for Review Proctor.

The dataclasses below describe everything a host application needs to hand to
:class:`reviewproctor.services.ReviewProctor`: the namespace its state lives
under, the default thresholds used while no override is persisted, and the
presentation strings used by the fallback dialog and the store link.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_REVIEW_TEXT = (
    "If you enjoy using this app, would you take a moment to rate it? "
    "This will help us reach others with similar interests. Thanks for your support!"
)


@dataclass(slots=True)
class ThresholdDefaults:
    """Threshold values used when nothing is persisted for a namespace."""

    significant_events: int = 30
    uses: int = 10
    days_since_install: int = 10
    days_since_last_review: int = 30
    reminder_days: int = 1

    def value_for(self, name: str) -> int:
        return int(getattr(self, name))


@dataclass(slots=True)
class PresentationDefaults:
    """Strings used when presenting a review request."""

    review_text: str = DEFAULT_REVIEW_TEXT
    app_title: Optional[str] = None
    affiliate_code: str = ""
    affiliate_campaign_code: str = ""


@dataclass(slots=True)
class StateConfig:
    """Where persisted proctoring state lives.

    ``path`` of ``None`` keeps the state in memory for the lifetime of the
    process.
    """

    path: Optional[Path] = None


@dataclass(slots=True)
class ProctorConfig:
    """Top-level configuration bundle for one embedding application."""

    namespace: str
    app_id: Optional[str] = None
    native_review: bool = True
    thresholds: ThresholdDefaults = field(default_factory=ThresholdDefaults)
    presentation: PresentationDefaults = field(default_factory=PresentationDefaults)
    state: StateConfig = field(default_factory=StateConfig)
