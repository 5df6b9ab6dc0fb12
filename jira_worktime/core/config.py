"""Central configuration: defaults, document field paths, and settings keys."""

from __future__ import annotations

from collections.abc import Sequence

# =============================================================================
# Working Hours Defaults
# =============================================================================
DEFAULT_WORKING_DAY_START_HOUR: int = 8
DEFAULT_WORKING_DAY_END_HOUR: int = 18
DEFAULT_WORKING_HOURS_PER_DAY: int = 8
DEFAULT_LUNCH_HOURS: int = 0  # reserved, no subtraction applied
DEFAULT_LUNCH_HOUR: int = 12  # reserved
DEFAULT_ROUNDING_THRESHOLD_MINUTES: int = 5

# =============================================================================
# Timestamp Parsing
# =============================================================================
# JIRA export format, e.g. "2015-10-06T13:42:55.837-0300"
DEFAULT_SOURCE_DATE_FORMAT = "yyyy-MM-dd'T'HH:mm:ss.SSSZ"
# Zone applied to timestamps whose format carries no offset
FALLBACK_TIMEZONE = "UTC"

# =============================================================================
# Document Layout (JIRA issue export)
# =============================================================================
DEFAULT_CREATED_FIELD = "fields.created"
DEFAULT_CHANGELOG_FIELD = "changelog.histories"
HISTORY_CREATED_FIELD = "created"
HISTORY_ITEMS_FIELD = "items"
ITEM_FIELD_NAME = "field"
STATUS_FIELD_NAME = "status"

# Issue-level fields denormalized onto every history entry
DEFAULT_CONTEXT_FIELDS: Sequence[str] = (
    "issue_type",
    "project_name",
)

# =============================================================================
# Settings Keys
# =============================================================================
CFG_TARGET_FIELD = "target_field"
CFG_SOURCE_DATE_FORMAT = "source_date_format"
CFG_CREATED_FIELD = "created_field"
CFG_CHANGELOG_FIELD = "changelog_field"
CFG_CONTEXT_FIELDS = "context_fields"
CFG_REMOVE_NON_STATUS_ITEMS = "remove_non_status_items"
CFG_WORKING_HOURS = "working_hours"

# Keys accepted inside the ``working_hours`` section
CFG_START_HOUR = "start_hour"
CFG_END_HOUR = "end_hour"
CFG_HOURS_PER_DAY = "hours_per_day"
CFG_LUNCH_HOURS = "lunch_hours"
CFG_LUNCH_HOUR = "lunch_hour"
CFG_ROUNDING_THRESHOLD = "rounding_threshold"
CFG_TIMEZONE = "timezone"
CFG_HOLIDAYS = "holidays"

# YAML files may nest the settings under this top-level key
YAML_SETTINGS_SECTION = "preprocessor"
