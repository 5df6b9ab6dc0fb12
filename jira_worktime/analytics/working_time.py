"""Business-hours duration between two instants.

The span is split into a first day (clipped at closing time), a last day
(clipped at opening time) and the whole calendar days in between. Days in
between count ``hours_per_day`` each, minus two days for every complete week,
which is how weekends are excluded: individual weekdays are never inspected.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytz

from jira_worktime.core.config import DEFAULT_SOURCE_DATE_FORMAT
from jira_worktime.core.errors import InvalidRangeError
from jira_worktime.core.models import DurationResult, WorkingHoursProfile
from jira_worktime.core.timestamps import TimestampParser

WEEKEND_DAYS_PER_WEEK = 2


def compute_working_time(
    start: datetime,
    end: datetime,
    profile: WorkingHoursProfile | None = None,
) -> DurationResult:
    """Compute total and working minutes between two timezone-aware instants.

    Parameters
    ----------
    start, end : datetime
        Timezone-aware instants, normally produced by the timestamp parser.
    profile : WorkingHoursProfile, optional
        Working window; defaults to 08:00-18:00 with 8 hours per day.

    Returns
    -------
    DurationResult
        Exact wall-clock minutes and business minutes, both floored.

    Raises
    ------
    InvalidRangeError
        If ``end`` is before ``start``.

    Notes
    -----
    Day boundaries use ``profile.timezone`` when set, otherwise each instant's
    own offset. A ``start`` before opening time is not clipped on a same-day span.
    """
    profile = profile or WorkingHoursProfile()
    if end < start:
        raise InvalidRangeError(f"End instant {end.isoformat()} is before start instant {start.isoformat()}")
    if profile.timezone:
        tz = pytz.timezone(profile.timezone)
        start = start.astimezone(tz)
        end = end.astimezone(tz)

    total_minutes = _whole_minutes(end - start)

    closing_first_day = _wall_clock(start, start.date(), profile.end_hour)
    next_midnight = _wall_clock(start, start.date() + timedelta(days=1), 0)

    if not _contains(start, end, next_midnight):
        # Anything after closing time on the same day is non-working
        if _contains(start, end, closing_first_day):
            worked = closing_first_day - start
        else:
            worked = end - start
    else:
        first_day = closing_first_day - start if start < closing_first_day else timedelta(0)

        opening_last_day = _wall_clock(end, end.date(), profile.start_hour)
        last_day = end - opening_last_day if opening_last_day < end else timedelta(0)

        days_between = _whole_days(next_midnight, opening_last_day)
        working_days = days_between - (days_between // 7) * WEEKEND_DAYS_PER_WEEK
        in_between = timedelta(hours=working_days * profile.hours_per_day)

        # TODO: subtract profile.lunch_hours per working day and skip profile.holidays
        worked = first_day + last_day + in_between

    return DurationResult(
        total_minutes=total_minutes,
        working_minutes=_whole_minutes(worked),
        rounding_threshold=profile.rounding_threshold,
    )


def working_time_between(
    start_text: str,
    end_text: str,
    date_format: str = DEFAULT_SOURCE_DATE_FORMAT,
    profile: WorkingHoursProfile | None = None,
) -> DurationResult:
    """Parse two timestamps with the same format and compute their working time."""
    parser = TimestampParser(date_format, profile.timezone if profile else None)
    return compute_working_time(parser.parse(start_text), parser.parse(end_text), profile)


# ------------------ Internal Helpers ------------------
def _wall_clock(reference: datetime, day: date, hour: int) -> datetime:
    """Return ``hour``:00 on ``day`` in the zone of ``reference``."""
    naive = datetime(day.year, day.month, day.day, hour)
    tz = reference.tzinfo
    localize = getattr(tz, "localize", None)
    if localize is not None:
        return localize(naive)
    return naive.replace(tzinfo=tz)


def _contains(start: datetime, end: datetime, instant: datetime) -> bool:
    # Half-open interval: the end instant itself is outside
    return start <= instant < end


def _whole_minutes(delta: timedelta) -> int:
    return int(delta.total_seconds() // 60)


def _whole_days(start: datetime, end: datetime) -> int:
    if end <= start:
        return 0
    days = (end.date() - start.date()).days
    # Partial last day does not count
    if end.time() < start.time():
        days -= 1
    return max(days, 0)
