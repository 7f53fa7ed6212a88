"""Recursive listing of reflection files under the repository root."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from memkit.reflections.store import RemoteStore

logger = logging.getLogger("memkit.reflections.walker")

_DIGIT_NAME = re.compile(r"^\d")


def is_digit_named(path: str) -> bool:
    """True when the last path segment starts with a digit (date-named)."""
    return bool(_DIGIT_NAME.match(path.rstrip("/").rsplit("/", 1)[-1]))


def order_entries(entries: list[str]) -> list[str]:
    """Stable sort: conventionally named entries first, date-named last."""
    return sorted(entries, key=is_digit_named)


class TreeWalker:
    """Walks ``<root>/<sub_path>`` on a :class:`RemoteStore`.

    Only files ending in *extension* are emitted, as full paths under
    *root*. Directories are descended into one level at a time.
    """

    def __init__(self, store: RemoteStore, root: str, extension: str) -> None:
        self.store = store
        self.root = root.strip("/")
        self.extension = extension

    def full_path(self, sub_path: str = "") -> str:
        return f"{self.root}/{sub_path}" if sub_path else self.root

    def relative(self, full_path: str) -> str:
        """Strip the ``<root>/`` prefix from a full entry path."""
        return full_path[len(self.root) + 1:]

    def list_entries(self, sub_path: str = "") -> list[str]:
        """Return every matching file under *sub_path*, ordered.

        An unknown non-empty *sub_path* is retried as a bare file name
        (``<sub_path><extension>``) so callers may address a leaf without
        knowing whether it is a file or a directory.
        """
        sub_path = sub_path.strip("/")
        items = self.store.list_directory(self.full_path(sub_path))
        if items is None:
            if sub_path:
                candidate = f"{sub_path}{self.extension}"
                if self.store.get_raw(self.full_path(candidate)) is not None:
                    return [self.full_path(candidate)]
            logger.debug("Nothing under %r", sub_path)
            return []

        prefix = self.full_path(sub_path)
        entries: list[str] = []
        for item in items:
            name = item.get("name", "")
            kind = item.get("type")
            if kind == "dir":
                entries.extend(
                    self.list_entries(f"{sub_path}/{name}" if sub_path else name)
                )
            elif kind == "file" and name.endswith(self.extension):
                entries.append(f"{prefix}/{name}")
        return order_entries(entries)
