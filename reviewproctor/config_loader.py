"""Utilities to load :mod:`reviewproctor.config` structures from YAML files."""
from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .config import (
    PresentationDefaults,
    ProctorConfig,
    StateConfig,
    ThresholdDefaults,
)


_THRESHOLD_NAMES = tuple(item.name for item in fields(ThresholdDefaults))


def load_config(path: Path) -> ProctorConfig:
    """Load a configuration file into :class:`ProctorConfig`.

    Only ``namespace`` is mandatory.  Fields omitted in the YAML file fall back
    to the defaults declared in :mod:`reviewproctor.config`.  Relative state
    paths are resolved against the directory holding the configuration file.
    """

    raw = _load_yaml(path)

    namespace = raw.get("namespace")
    if not namespace or not isinstance(namespace, str):
        raise ValueError("configuration requires a non-empty 'namespace' string")

    app_id = raw.get("app_id")

    defaults = ThresholdDefaults()
    thresholds_section = _section(raw, "thresholds")
    unknown = set(thresholds_section) - set(_THRESHOLD_NAMES)
    if unknown:
        raise ValueError(f"unknown thresholds: {', '.join(sorted(unknown))}")
    thresholds = ThresholdDefaults(
        **{
            name: _parse_int(thresholds_section.get(name, defaults.value_for(name)), name)
            for name in _THRESHOLD_NAMES
        }
    )

    presentation_section = _section(raw, "presentation")
    presentation_defaults = PresentationDefaults()
    presentation = PresentationDefaults(
        review_text=str(presentation_section.get("review_text", presentation_defaults.review_text)),
        app_title=_optional_str(presentation_section.get("app_title")),
        affiliate_code=str(presentation_section.get("affiliate_code", "")),
        affiliate_campaign_code=str(presentation_section.get("affiliate_campaign_code", "")),
    )

    state_section = _section(raw, "state")
    state_path = None
    if state_section.get("path"):
        state_path = Path(state_section["path"])
        if not state_path.is_absolute():
            state_path = path.parent / state_path

    return ProctorConfig(
        namespace=namespace,
        app_id=_optional_str(app_id),
        native_review=bool(raw.get("native_review", True)),
        thresholds=thresholds,
        presentation=presentation,
        state=StateConfig(path=state_path),
    )


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, Mapping):
        raise ValueError("configuration root must be a mapping")
    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"'{name}' section must be a mapping")
    return section


def _parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"threshold {name} must be an integer, got {value!r}")
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"threshold {name} must be an integer, got {value!r}") from exc


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
