"""Turns a full, partial or absent date into the entries to fetch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from memkit.reflections.walker import TreeWalker

logger = logging.getLogger("memkit.reflections.resolver")


class LatestEntryResolver:
    def __init__(self, walker: TreeWalker) -> None:
        self.walker = walker

    def resolve(self, date: str = "", latest: bool | None = None) -> list[str]:
        """Return the full paths selected for *date*.

        *date* may be ``YYYY``, ``YYYY/MM``, ``YYYY/MM/DD`` (with or without
        the extension) or empty for the repository root. *latest* defaults
        to ``True`` only when no date is given.

        Selection, in order:

        1. files found under *date*: the last one when *latest*, else all;
        2. only directory markers and *latest*: descend into the last one;
        3. nothing found for a non-empty *date*: guess ``<date><ext>`` as a
           literal path, confirmed only when fetched;
        4. otherwise nothing.
        """
        date = date.strip("/")
        if latest is None:
            latest = not date
        ext = self.walker.extension

        items = self.walker.list_entries(date)
        files = [e for e in items if e.endswith(ext)]
        dirs = [e for e in items if e.endswith("/")]

        if files:
            return files[-1:] if latest else files
        if dirs and latest:
            latest_dir = self.walker.relative(dirs[-1]).rstrip("/")
            logger.debug("Descending into %s", latest_dir)
            return self.resolve(latest_dir, True)
        if date and not items:
            file_path = date if date.endswith(ext) else f"{date}{ext}"
            return [self.walker.full_path(file_path)]
        return []
