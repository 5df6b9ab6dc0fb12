"""Walk an issue changelog and store business hours on each status transition.

The walker is a single-pass state machine. Its only carried value is the
instant of the previous transition, seeded from the issue creation date. Each
``status`` item gets the rounded-up working hours between that instant and its
history entry's ``created`` timestamp, written at the target field.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from jira_worktime.analytics.working_time import compute_working_time
from jira_worktime.core.config import (
    DEFAULT_CHANGELOG_FIELD,
    DEFAULT_CONTEXT_FIELDS,
    DEFAULT_CREATED_FIELD,
    DEFAULT_SOURCE_DATE_FORMAT,
    HISTORY_CREATED_FIELD,
    HISTORY_ITEMS_FIELD,
)
from jira_worktime.core.errors import InvalidRangeError, ParseError, SettingsError, StructuralError
from jira_worktime.core.models import WorkingHoursProfile
from jira_worktime.core.status import is_status_item
from jira_worktime.core.structure import get_by_path, put_by_path
from jira_worktime.core.timestamps import TimestampParser, validate_date_format

logger = logging.getLogger(__name__)

# reporter(context, message); context names the document location
WarningReporter = Callable[[str, str], None]


class WalkState(Enum):
    AWAITING_FIRST_TIMESTAMP = "awaiting_first_timestamp"
    HAVE_PREVIOUS_INSTANT = "have_previous_instant"
    PREVIOUS_INSTANT_UNKNOWN = "previous_instant_unknown"


@dataclass(slots=True)
class TransitionOutcome:
    history_index: int
    item_index: int
    hours: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.hours is not None


@dataclass(slots=True)
class WalkResult:
    document: dict[str, Any] | None
    outcomes: list[TransitionOutcome] = field(default_factory=list)
    state: WalkState = WalkState.AWAITING_FIRST_TIMESTAMP

    @property
    def written(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)


def log_warning(context: str, message: str) -> None:
    logger.warning("%s: %s", context, message)


class TransitionWalker:
    """Apply the duration engine across a document's ordered change history.

    The walker holds configuration only. Every :meth:`walk` call starts from
    fresh state, so one instance can serve many documents, including from
    several threads at once.
    """

    def __init__(
        self,
        target_field: str,
        profile: WorkingHoursProfile | None = None,
        *,
        remove_non_status_items: bool = False,
        source_date_format: str = DEFAULT_SOURCE_DATE_FORMAT,
        created_field: str = DEFAULT_CREATED_FIELD,
        changelog_field: str = DEFAULT_CHANGELOG_FIELD,
        context_fields: Sequence[str] = DEFAULT_CONTEXT_FIELDS,
        reporter: WarningReporter | None = None,
    ):
        if not target_field:
            raise SettingsError("target_field must be defined")
        self.target_field = target_field
        self.profile = profile or WorkingHoursProfile()
        self.remove_non_status_items = remove_non_status_items
        self.created_field = created_field
        self.changelog_field = changelog_field
        self.context_fields = tuple(context_fields)
        self.reporter = reporter or log_warning
        try:
            validate_date_format(source_date_format)
        except ParseError as exc:
            raise SettingsError(str(exc)) from exc
        self._parser = TimestampParser(source_date_format, self.profile.timezone)

    def walk(self, document: dict[str, Any] | None) -> WalkResult:
        if document is None:
            return WalkResult(document=None)

        previous, state = self._seed(document)
        result = WalkResult(document=document, state=state)

        histories = get_by_path(document, self.changelog_field)
        if not isinstance(histories, list):
            return result

        for h_idx, entry in enumerate(histories):
            if not isinstance(entry, MutableMapping):
                continue
            self._copy_context(document, entry)
            items = entry.get(HISTORY_ITEMS_FIELD)
            if not isinstance(items, list):
                continue

            to_remove: list[int] = []
            for i_idx, item in enumerate(items):
                if not is_status_item(item):
                    if self.remove_non_status_items:
                        to_remove.append(i_idx)
                    continue
                outcome = TransitionOutcome(history_index=h_idx, item_index=i_idx)
                event = self._parse_event(entry, outcome)
                if previous is not None and event is not None:
                    self._write_duration(previous, event, item, outcome)
                # Fail-forward: an unparsable event date also clears the previous instant
                previous = event
                state = (
                    WalkState.HAVE_PREVIOUS_INSTANT
                    if event is not None
                    else WalkState.PREVIOUS_INSTANT_UNKNOWN
                )
                result.outcomes.append(outcome)

            if to_remove:
                removed = set(to_remove)
                items[:] = [it for idx, it in enumerate(items) if idx not in removed]

        result.state = state
        logger.debug(
            "Walked %d history entries, wrote %d of %d transitions",
            len(histories),
            result.written,
            len(result.outcomes),
        )
        return result

    # ------------------ Internal Helpers ------------------
    def _seed(self, document: dict[str, Any]) -> tuple[datetime | None, WalkState]:
        raw = get_by_path(document, self.created_field)
        if raw is None:
            return None, WalkState.AWAITING_FIRST_TIMESTAMP
        try:
            return self._parser.parse(raw), WalkState.HAVE_PREVIOUS_INSTANT
        except ParseError as exc:
            self.reporter(self.created_field, str(exc))
            return None, WalkState.PREVIOUS_INSTANT_UNKNOWN

    def _copy_context(self, document: dict[str, Any], entry: MutableMapping[str, Any]) -> None:
        for name in self.context_fields:
            if name in document:
                entry[name] = document[name]

    def _parse_event(self, entry: MutableMapping[str, Any], outcome: TransitionOutcome) -> datetime | None:
        try:
            return self._parser.parse(entry.get(HISTORY_CREATED_FIELD))
        except ParseError as exc:
            outcome.error = str(exc)
            self.reporter(self._context(outcome, HISTORY_CREATED_FIELD), str(exc))
            return None

    def _write_duration(
        self,
        previous: datetime,
        event: datetime,
        item: MutableMapping[str, Any],
        outcome: TransitionOutcome,
    ) -> None:
        try:
            duration = compute_working_time(previous, event, self.profile)
            hours = duration.working_hours_round_up()
            put_by_path(item, self.target_field, hours)
        except (InvalidRangeError, StructuralError) as exc:
            outcome.error = str(exc)
            self.reporter(self._context(outcome, self.target_field), str(exc))
            return
        outcome.hours = hours

    def _context(self, outcome: TransitionOutcome, leaf: str) -> str:
        return f"{self.changelog_field}[{outcome.history_index}].{leaf}"


def apply_durations(
    document: dict[str, Any] | None,
    profile: WorkingHoursProfile | None,
    target_field: str,
    remove_non_status_items: bool = False,
    *,
    source_date_format: str = DEFAULT_SOURCE_DATE_FORMAT,
    created_field: str = DEFAULT_CREATED_FIELD,
    changelog_field: str = DEFAULT_CHANGELOG_FIELD,
    context_fields: Sequence[str] = DEFAULT_CONTEXT_FIELDS,
    reporter: WarningReporter | None = None,
) -> dict[str, Any] | None:
    """Write working hours onto every status transition of ``document`` in place.

    Returns the same document object (None when given None).
    """
    walker = TransitionWalker(
        target_field,
        profile,
        remove_non_status_items=remove_non_status_items,
        source_date_format=source_date_format,
        created_field=created_field,
        changelog_field=changelog_field,
        context_fields=context_fields,
        reporter=reporter,
    )
    return walker.walk(document).document
