#!/usr/bin/env python3
"""
settings.py
-----------
Periodic note settings and view options, persisted as YAML.

Settings file layout:

    daily:
      enabled: true
      folder: Journal/Daily
      format: YYYY-MM-DD
      template: Templates/daily.md
    weekly:
      enabled: true
      folder: Journal/Weekly
      format: gggg-[W]ww
    view:
      mode: daily
      future_periods: 3
      expand_first: true
      show_missing: true
      sort: desc
      done_property: done

Missing blocks and keys fall back to the defaults below. Values are
normalized through DataValidator; anything unusable raises
ConfigurationError naming the offending key.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Third party imports ---
import yaml

# --- Local imports ---
from perinotes.core.exceptions import ConfigurationError, ValidationError
from perinotes.core.logging_manager import PerinotesLogger, safe_logger
from perinotes.core.validators import DataValidator
from perinotes.periods.granularity import SPECIFICITY_ORDER, Granularity
from perinotes.periods.merge import SortDirection

DEFAULT_FORMATS: Dict[Granularity, str] = {
    Granularity.DAILY: "YYYY-MM-DD",
    Granularity.WEEKLY: "gggg-[W]ww",
    Granularity.MONTHLY: "YYYY-MM",
    Granularity.QUARTERLY: "YYYY-[Q]Q",
    Granularity.YEARLY: "YYYY",
}

DEFAULT_FUTURE_PERIODS = 3
MAX_FUTURE_PERIODS = 12


@dataclass(frozen=True)
class PeriodConfig:
    """
    Settings for one granularity.

    Attributes:
        enabled: Whether notes of this granularity are managed
        folder: Store folder holding the notes (prefix match)
        naming_pattern: Moment-style pattern, may include subfolders
        template: Store path of the template for new notes, or None
    """

    enabled: bool = False
    folder: str = ""
    naming_pattern: str = ""
    template: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "folder": self.folder,
            "format": self.naming_pattern,
            "template": self.template,
        }


@dataclass(frozen=True)
class ViewOptions:
    """
    Options of the periodic notes list.

    Attributes:
        mode: Granularity shown
        future_periods: Placeholders proposed past the current period (0-12)
        expand_first: Expand the first card when it is created
        show_missing: Show placeholders for missing periods
        direction: Sort direction
        done_property: Frontmatter property holding the done flag
    """

    mode: Granularity = Granularity.DAILY
    future_periods: int = DEFAULT_FUTURE_PERIODS
    expand_first: bool = True
    show_missing: bool = True
    direction: SortDirection = SortDirection.DESC
    done_property: str = "done"

    def __post_init__(self) -> None:
        if not 0 <= self.future_periods <= MAX_FUTURE_PERIODS:
            raise ConfigurationError(
                f"future_periods must be between 0 and {MAX_FUTURE_PERIODS}, "
                f"got {self.future_periods}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "future_periods": self.future_periods,
            "expand_first": self.expand_first,
            "show_missing": self.show_missing,
            "sort": self.direction.value,
            "done_property": self.done_property,
        }


@dataclass(frozen=True)
class PeriodicSettings:
    """All granularity configs plus view options."""

    periods: Dict[Granularity, PeriodConfig] = field(
        default_factory=lambda: {
            g: PeriodConfig(naming_pattern=DEFAULT_FORMATS[g]) for g in SPECIFICITY_ORDER
        }
    )
    view: ViewOptions = field(default_factory=ViewOptions)

    def config(self, granularity: Granularity) -> PeriodConfig:
        return self.periods.get(
            granularity, PeriodConfig(naming_pattern=DEFAULT_FORMATS[granularity])
        )

    @property
    def enabled(self) -> List[Granularity]:
        """Enabled granularities, least specific first."""
        return [g for g in SPECIFICITY_ORDER if self.config(g).enabled]

    def with_view(self, **changes: Any) -> "PeriodicSettings":
        return replace(self, view=replace(self.view, **changes))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {g.value: self.config(g).to_dict() for g in SPECIFICITY_ORDER}
        data["view"] = self.view.to_dict()
        return data


# ----- Parsing -----

def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{key}' must be a mapping, got {type(section).__name__}")
    return section


def _parse_period(granularity: Granularity, raw: Dict[str, Any]) -> PeriodConfig:
    try:
        enabled = DataValidator.normalize_bool(raw.get("enabled", False)) or False
    except ValidationError as e:
        raise ConfigurationError(f"{granularity.value}.enabled: {e}") from e

    folder = (DataValidator.normalize_string(raw.get("folder")) or "").strip("/")
    pattern = (
        DataValidator.normalize_string(raw.get("format"))
        or DEFAULT_FORMATS[granularity]
    )
    template = DataValidator.normalize_string(raw.get("template"))
    return PeriodConfig(enabled, folder, pattern, template)


def _parse_view(raw: Dict[str, Any]) -> ViewOptions:
    defaults = ViewOptions()
    try:
        mode = Granularity.parse(raw.get("mode", defaults.mode.value))
        future = DataValidator.normalize_int(raw.get("future_periods"))
        expand_first = DataValidator.normalize_bool(raw.get("expand_first"))
        show_missing = DataValidator.normalize_bool(raw.get("show_missing"))
    except ValidationError as e:
        raise ConfigurationError(f"view: {e}") from e

    sort = str(raw.get("sort", defaults.direction.value)).lower()
    if sort not in SortDirection.choices():
        raise ConfigurationError(f"view.sort must be one of {SortDirection.choices()}, got '{sort}'")

    return ViewOptions(
        mode=mode,
        future_periods=defaults.future_periods if future is None else future,
        expand_first=defaults.expand_first if expand_first is None else expand_first,
        show_missing=defaults.show_missing if show_missing is None else show_missing,
        direction=SortDirection(sort),
        done_property=DataValidator.normalize_string(raw.get("done_property"))
        or defaults.done_property,
    )


def settings_from_dict(data: Optional[Dict[str, Any]]) -> PeriodicSettings:
    """
    Build settings from a parsed YAML mapping.

    Raises:
        ConfigurationError: On unknown sections or invalid values
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Settings must be a mapping")

    known = set(Granularity.choices()) | {"view"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown settings sections: {', '.join(unknown)}")

    periods = {g: _parse_period(g, _section(data, g.value)) for g in SPECIFICITY_ORDER}
    return PeriodicSettings(periods=periods, view=_parse_view(_section(data, "view")))


def load_settings(
    path: Path, logger: Optional[PerinotesLogger] = None
) -> PeriodicSettings:
    """
    Load settings from a YAML file; a missing file yields the defaults.

    Raises:
        ConfigurationError: If the file is not valid YAML or holds bad values
    """
    log = safe_logger(logger)
    if not path.exists():
        log.log_debug("Settings file not found, using defaults", {"path": path})
        return PeriodicSettings()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    settings = settings_from_dict(data)
    log.log_operation(
        "load_settings",
        {"path": path, "enabled": [g.value for g in settings.enabled]},
    )
    return settings


def save_settings(path: Path, settings: PeriodicSettings) -> None:
    """Write settings to a YAML file, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(settings.to_dict(), sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
