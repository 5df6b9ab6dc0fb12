"""Build preprocessor settings from a plugin settings map or a YAML file."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pytz
import yaml

from .config import (
    CFG_CHANGELOG_FIELD,
    CFG_CONTEXT_FIELDS,
    CFG_CREATED_FIELD,
    CFG_END_HOUR,
    CFG_HOLIDAYS,
    CFG_HOURS_PER_DAY,
    CFG_LUNCH_HOUR,
    CFG_LUNCH_HOURS,
    CFG_REMOVE_NON_STATUS_ITEMS,
    CFG_ROUNDING_THRESHOLD,
    CFG_SOURCE_DATE_FORMAT,
    CFG_START_HOUR,
    CFG_TARGET_FIELD,
    CFG_TIMEZONE,
    CFG_WORKING_HOURS,
    DEFAULT_CHANGELOG_FIELD,
    DEFAULT_CONTEXT_FIELDS,
    DEFAULT_CREATED_FIELD,
    DEFAULT_SOURCE_DATE_FORMAT,
    YAML_SETTINGS_SECTION,
)
from .errors import ParseError, SettingsError
from .models import WorkingHoursProfile
from .structure import node_integer_value
from .timestamps import validate_date_format

_PROFILE_INT_KEYS: tuple[str, ...] = (
    CFG_START_HOUR,
    CFG_END_HOUR,
    CFG_HOURS_PER_DAY,
    CFG_LUNCH_HOURS,
    CFG_LUNCH_HOUR,
    CFG_ROUNDING_THRESHOLD,
)


@dataclass(slots=True)
class PreprocessorSettings:
    target_field: str
    source_date_format: str = DEFAULT_SOURCE_DATE_FORMAT
    created_field: str = DEFAULT_CREATED_FIELD
    changelog_field: str = DEFAULT_CHANGELOG_FIELD
    context_fields: tuple[str, ...] = tuple(DEFAULT_CONTEXT_FIELDS)
    remove_non_status_items: bool = False
    profile: WorkingHoursProfile = field(default_factory=WorkingHoursProfile)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any] | None, *, name: str = "") -> PreprocessorSettings:
        """Validate a settings map (as found in the pipeline configuration).

        Raises
        ------
        SettingsError
            If the map is missing, ``target_field`` is empty, or any option has
            the wrong type or an out-of-range value.
        """
        if settings is None:
            raise SettingsError(f"'settings' section is not defined for preprocessor {name}".rstrip())
        if not isinstance(settings, Mapping):
            raise SettingsError(f"'settings' section for preprocessor {name} must be a mapping")
        target = _string_option(settings, CFG_TARGET_FIELD, None, name)
        if not target:
            raise SettingsError(f"Missing or empty 'settings/{CFG_TARGET_FIELD}' configuration value for {name}")
        context = settings.get(CFG_CONTEXT_FIELDS, DEFAULT_CONTEXT_FIELDS)
        if isinstance(context, str) or not isinstance(context, Sequence):
            raise SettingsError(f"'settings/{CFG_CONTEXT_FIELDS}' must be a list of field names")
        return cls(
            target_field=target,
            source_date_format=_date_format_option(settings, name),
            created_field=_string_option(settings, CFG_CREATED_FIELD, DEFAULT_CREATED_FIELD, name),
            changelog_field=_string_option(settings, CFG_CHANGELOG_FIELD, DEFAULT_CHANGELOG_FIELD, name),
            context_fields=tuple(str(c) for c in context),
            remove_non_status_items=_bool_option(settings, CFG_REMOVE_NON_STATUS_ITEMS),
            profile=build_profile(settings.get(CFG_WORKING_HOURS)),
        )


def build_profile(section: Mapping[str, Any] | None) -> WorkingHoursProfile:
    """Create a :class:`WorkingHoursProfile` from a ``working_hours`` section.

    Absent keys keep their defaults. Integer options accept numeric strings.
    """
    if section is None:
        return WorkingHoursProfile()
    if not isinstance(section, Mapping):
        raise SettingsError(f"'settings/{CFG_WORKING_HOURS}' must be a mapping")
    kwargs: dict[str, Any] = {}
    for key in _PROFILE_INT_KEYS:
        if section.get(key) is None:
            continue
        try:
            kwargs[key] = node_integer_value(section[key])
        except (TypeError, ValueError) as exc:
            raise SettingsError(
                f"'settings/{CFG_WORKING_HOURS}/{key}' must be an integer, got {section[key]!r}"
            ) from exc
    tz_name = section.get(CFG_TIMEZONE)
    if tz_name is not None:
        kwargs[CFG_TIMEZONE] = _validate_timezone(tz_name)
    holidays = section.get(CFG_HOLIDAYS)
    if holidays:
        kwargs[CFG_HOLIDAYS] = tuple(_as_date(h) for h in holidays)
    return WorkingHoursProfile(**kwargs)


def load_settings(path: str | Path, *, name: str = "") -> PreprocessorSettings:
    """Read settings from a YAML file, optionally nested under ``preprocessor:``."""
    yaml_path = Path(path)
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise SettingsError(f"Unable to read preprocessor settings from {yaml_path}: {exc}") from exc
    if isinstance(data, Mapping) and isinstance(data.get(YAML_SETTINGS_SECTION), Mapping):
        data = data[YAML_SETTINGS_SECTION]
    return PreprocessorSettings.from_mapping(data, name=name)


# ------------------ Internal Helpers ------------------
def _string_option(settings: Mapping[str, Any], key: str, default: str | None, name: str) -> str | None:
    value = settings.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise SettingsError(f"'settings/{key}' for preprocessor {name} must be a string")
    return value.strip() or default


def _bool_option(settings: Mapping[str, Any], key: str) -> bool:
    value = settings.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1", "on"}
    return bool(value)


def _validate_timezone(value: Any) -> str:
    try:
        return pytz.timezone(str(value)).zone
    except pytz.UnknownTimeZoneError as exc:
        raise SettingsError(f"Unknown timezone '{value}' in '{CFG_WORKING_HOURS}' settings") from exc


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise SettingsError(f"Holiday '{value}' is not an ISO date") from exc


def _date_format_option(settings: Mapping[str, Any], name: str) -> str:
    date_format = _string_option(settings, CFG_SOURCE_DATE_FORMAT, DEFAULT_SOURCE_DATE_FORMAT, name)
    try:
        validate_date_format(date_format)
    except ParseError as exc:
        raise SettingsError(
            f"Invalid 'settings/{CFG_SOURCE_DATE_FORMAT}' for preprocessor {name}: {exc}"
        ) from exc
    return date_format
