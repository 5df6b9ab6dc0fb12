"""Business-hours enrichment for JIRA issue changelogs."""

from jira_worktime.analytics.working_time import compute_working_time
from jira_worktime.core.models import DurationResult, WorkingHoursProfile
from jira_worktime.preprocess.preprocessor import TimeInSourceStatusPreprocessor
from jira_worktime.preprocess.transitions import apply_durations

__all__ = [
    "DurationResult",
    "TimeInSourceStatusPreprocessor",
    "WorkingHoursProfile",
    "apply_durations",
    "compute_working_time",
]
