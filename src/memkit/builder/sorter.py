"""Inheritance ordering for profile and instruction units.

Units are plain mappings keyed by name; a unit may list parent names under
``inherits``. The ordering starts from the most derived units and walks
towards their foundations: every unit precedes all of its ancestors.
Bodies are never merged here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def parents(unit: Any) -> list[str]:
    """Parent names declared by *unit*; ``inherits`` may be a name or a list."""
    inherits = unit.get("inherits") if isinstance(unit, Mapping) else None
    if isinstance(inherits, str):
        return [inherits]
    if isinstance(inherits, list | tuple):
        return [p for p in inherits if isinstance(p, str)]
    return []


def order(units: Mapping[str, Any]) -> dict[str, Any]:
    """Return *units* re-keyed in inheritance order.

    Depth-first over the ``inherits`` graph with an explicit visited set:
    each unit is appended after its (known) parents, then the whole
    sequence is reversed so each unit lands before its parents. Parents
    missing from *units* are ignored. Shared ancestors appear once; cycles
    resolve to first-visit order.
    """
    names = list(units)
    known = set(names)
    graph = {name: [p for p in parents(units[name]) if p in known] for name in names}

    visited: set[str] = set()
    result: list[str] = []
    for start in names:
        if start in visited:
            continue
        visited.add(start)
        # Each frame is (name, iterator over its parents)
        stack = [(start, iter(graph[start]))]
        while stack:
            name, pending = stack[-1]
            for parent in pending:
                if parent not in visited:
                    visited.add(parent)
                    stack.append((parent, iter(graph[parent])))
                    break
            else:
                stack.pop()
                result.append(name)

    result.reverse()
    return {name: units[name] for name in result}


def sorted_output(units: Mapping[str, Any], key: str, version: str) -> dict[str, Any]:
    """Wrap the ordered *units* as ``{key: {...}, "version": version}``."""
    return {key: order(units), "version": version}
