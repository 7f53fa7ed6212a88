"""Reflection reader: resolve a date specifier, then fetch the entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import memkit.reflections.fetcher
import memkit.reflections.resolver
import memkit.reflections.walker

if TYPE_CHECKING:
    from collections.abc import Callable

    from memkit.reflections.config import ReflectionsConfig
    from memkit.reflections.store import RemoteStore


class ReflectionReader:
    def __init__(
        self,
        store: RemoteStore,
        cfg: ReflectionsConfig,
        parser: Callable[[str], Any] | None = None,
    ) -> None:
        self.walker = memkit.reflections.walker.TreeWalker(
            store, cfg.path, cfg.extension
        )
        self.resolver = memkit.reflections.resolver.LatestEntryResolver(self.walker)
        if parser is None:
            self.fetcher = memkit.reflections.fetcher.BatchContentFetcher(store)
        else:
            self.fetcher = memkit.reflections.fetcher.BatchContentFetcher(store, parser)

    def list_entries(self, date: str = "") -> dict[str, list[str]]:
        """Return ``{"entries": [...]}`` with every entry path under *date*."""
        return {"entries": self.walker.list_entries(date)}

    def get(
        self, date: str = "", latest: bool | None = None, raw: bool = False
    ) -> dict[str, list[memkit.reflections.fetcher.ReflectionRecord]]:
        """Return ``{"entries": [{path, reflection}, ...]}`` for *date*."""
        paths = self.resolver.resolve(date, latest)
        return {"entries": self.fetcher.fetch_all(paths, raw)}
