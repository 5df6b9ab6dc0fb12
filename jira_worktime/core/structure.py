"""Dotted-path access and copying for nested dict/list documents.

Structured content is represented as plain dicts of dicts and lists, the shape
``json.loads`` produces for a JIRA issue export.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from .errors import StructuralError


def get_by_path(data: Mapping[str, Any] | None, path: str) -> Any:
    """Return the value at dotted ``path`` or None when any segment is missing."""
    if data is None or not path:
        return None
    node: Any = data
    for token in path.split("."):
        if not isinstance(node, Mapping):
            return None
        node = node.get(token)
        if node is None:
            return None
    return node


def put_by_path(data: MutableMapping[str, Any] | None, path: str, value: Any) -> None:
    """Store ``value`` at dotted ``path``, creating intermediate dicts as needed.

    Raises
    ------
    ValueError
        If ``path`` is empty.
    StructuralError
        If an intermediate segment holds something other than a mapping.
    """
    if data is None:
        return
    if not path:
        raise ValueError("path argument must be defined")
    *parents, leaf = path.split(".")
    level = data
    for token in parents:
        node = level.get(token)
        if node is None:
            node = {}
            level[token] = node
        elif not isinstance(node, MutableMapping):
            raise StructuralError(
                f"Can't put value for field '{path}' because element '{token}' in the path is not a mapping"
            )
        level = node
    level[leaf] = value


def deep_copy(value: Any) -> Any:
    """Recursively copy lists and mappings; scalars are returned by reference.

    ``None`` list elements and ``None``-valued keys are left out of the copy.
    """
    if value is None:
        return None
    if isinstance(value, list):
        copied_list = []
        for elem in value:
            copied = deep_copy(elem)
            if copied is None:
                continue
            copied_list.append(copied)
        return copied_list
    if isinstance(value, Mapping):
        copied_map: dict[Any, Any] = {}
        for key, elem in value.items():
            copied = deep_copy(elem)
            if copied is None:
                continue
            copied_map[key] = copied
        return copied_map
    return value


def filter_data_in_map(data: MutableMapping[Any, Any] | None, keys_to_leave: Iterable[Any] | None) -> None:
    """Drop every key not in ``keys_to_leave``; no filtering when it is empty."""
    if not data:
        return
    keep = set(keys_to_leave or ())
    if not keep:
        return
    for key in [k for k in data if k not in keep]:
        del data[key]


def remap_data_in_map(
    data: MutableMapping[Any, Any] | None, remap_instructions: Mapping[Any, Any] | None
) -> None:
    """Keep only keys named in ``remap_instructions``, renamed to their new keys.

    When two old keys map to the same new key the later one (in ``data``
    iteration order) wins.
    """
    if not data or not remap_instructions:
        return
    remapped = {
        remap_instructions[key]: value for key, value in data.items() if key in remap_instructions
    }
    data.clear()
    data.update(remapped)


def node_integer_value(node: Any) -> int | None:
    """Coerce an int, number, or numeric string to ``int``; None passes through.

    Raises ``ValueError`` for strings that are not integers.
    """
    if node is None:
        return None
    if isinstance(node, bool):
        return int(node)
    if isinstance(node, int):
        return node
    if isinstance(node, float):
        return int(node)
    return int(str(node).strip())
