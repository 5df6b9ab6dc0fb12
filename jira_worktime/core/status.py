"""Status item recognition and status names for changelog transitions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import ITEM_FIELD_NAME, STATUS_FIELD_NAME

UNKNOWN_STATUS = "Unknown"


def is_status_item(item: Any) -> bool:
    """Return True when a changelog item records a workflow status transition.

    Only items whose ``field`` is exactly ``"status"`` count; JIRA writes other
    workflow-related fields (``resolution``, ``Workflow``) as separate items.
    """
    return isinstance(item, Mapping) and item.get(ITEM_FIELD_NAME) == STATUS_FIELD_NAME


def clean_status_name(value: Any) -> str:
    """Normalize a status display name from a changelog item.

    Collapses whitespace runs (older exports contain "In  Progress") and maps
    empty values to ``UNKNOWN_STATUS``. Case is kept: JIRA status names are
    case-sensitive workflow identifiers.
    """
    if value is None:
        return UNKNOWN_STATUS
    text = " ".join(str(value).split())
    return text or UNKNOWN_STATUS


def transition_statuses(item: Mapping[str, Any]) -> tuple[str, str]:
    """Return the (source, destination) status names of a status item.

    ``fromString``/``toString`` carry the display names; when an export only
    has the raw ``from``/``to`` status ids those are used instead.
    """
    source = item.get("fromString") or item.get("from")
    target = item.get("toString") or item.get("to")
    return clean_status_name(source), clean_status_name(target)
