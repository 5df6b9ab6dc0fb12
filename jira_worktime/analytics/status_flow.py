"""Status transition reporting over preprocessed issue documents.

Turns the hours written by the transition walker into long-form frames so the
time spent in each source status can be compared across issues.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from jira_worktime.core.config import (
    DEFAULT_CHANGELOG_FIELD,
    HISTORY_CREATED_FIELD,
    HISTORY_ITEMS_FIELD,
)
from jira_worktime.core.status import is_status_item, transition_statuses
from jira_worktime.core.structure import get_by_path

TRANSITION_COLUMNS = ("key", "created", "from_status", "to_status", "hours")


def build_transition_frame(
    documents: Iterable[dict[str, Any] | None],
    target_field: str,
    *,
    key_field: str = "key",
    changelog_field: str = DEFAULT_CHANGELOG_FIELD,
) -> pd.DataFrame:
    """Build a DataFrame with one row per status transition carrying hours.

    Parameters
    ----------
    documents : iterable of dict
        Issue documents already processed by the transition walker.
    target_field : str
        Dotted path (inside each item) where hours were written.
    key_field : str
        Dotted path of the issue key in each document.
    changelog_field : str
        Dotted path of the history list.

    Returns
    -------
    pd.DataFrame
        Columns: key, created, from_status, to_status, hours. Items without a
        computed duration are skipped; an empty frame keeps the columns.
    """
    records: list[dict[str, object]] = []
    for doc in documents:
        if not isinstance(doc, dict):
            continue
        histories = get_by_path(doc, changelog_field)
        if not isinstance(histories, list):
            continue
        key = get_by_path(doc, key_field)
        for entry in histories:
            if not isinstance(entry, dict):
                continue
            for item in entry.get(HISTORY_ITEMS_FIELD) or []:
                if not is_status_item(item):
                    continue
                hours = get_by_path(item, target_field)
                if hours is None:
                    continue
                from_status, to_status = transition_statuses(item)
                records.append(
                    {
                        "key": key,
                        "created": entry.get(HISTORY_CREATED_FIELD),
                        "from_status": from_status,
                        "to_status": to_status,
                        "hours": int(hours),
                    }
                )

    if not records:
        return pd.DataFrame(columns=list(TRANSITION_COLUMNS))
    return pd.DataFrame(records, columns=list(TRANSITION_COLUMNS))


def summarize_hours_by_status(frame: pd.DataFrame) -> pd.DataFrame:
    """Aggregate working hours per source status.

    Returns columns ``from_status``, ``transitions``, ``total_hours`` and
    ``median_hours`` sorted by total hours descending.
    """
    if frame.empty or "from_status" not in frame.columns:
        return pd.DataFrame(columns=["from_status", "transitions", "total_hours", "median_hours"])
    grouped = (
        frame.groupby("from_status")
        .agg(
            transitions=("hours", "count"),
            total_hours=("hours", "sum"),
            median_hours=("hours", "median"),
        )
        .reset_index()
    )
    return grouped.sort_values(
        by=["total_hours", "from_status"], ascending=[False, True]
    ).reset_index(drop=True)
