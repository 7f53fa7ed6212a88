"""Sequential content fetch for a resolved set of entry paths."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypedDict

import memkit.reflections.markdown

if TYPE_CHECKING:
    from memkit.reflections.store import RemoteStore

logger = logging.getLogger("memkit.reflections.fetcher")


class ReflectionRecord(TypedDict):
    """One fetched entry; *reflection* is raw text or the parsed tree."""

    path: str
    reflection: Any


class BatchContentFetcher:
    """Fetches entries one request at a time, skipping missing ones.

    Any non-404 failure propagates out of :meth:`fetch_all` and aborts the
    whole batch.
    """

    def __init__(
        self,
        store: RemoteStore,
        parser: Callable[[str], Any] = memkit.reflections.markdown.parse,
    ) -> None:
        self.store = store
        self.parser = parser

    def fetch_all(self, paths: list[str], raw: bool = False) -> list[ReflectionRecord]:
        records: list[ReflectionRecord] = []
        for path in paths:
            content = self.store.get_raw(path)
            if content is None:
                logger.debug("Skipping missing entry %s", path)
                continue
            records.append(
                {"path": path, "reflection": content if raw else self.parser(content)}
            )
        return records
